'''
The fourth UID of the header is a checksum of the other three: each bit set
in one of them toggles a constant of the table associated to that UID.
'''

from .. import fields


UID1_TABLE = (
    0x000045A0, 0x00008B40, 0x000006A1, 0x00000D42, 0x00001A84, 0x00003508, 0x00006A10, 0x0000D420,
    0x45A00000, 0x8B400000, 0x06A10000, 0x0D420000, 0x1A840000, 0x35080000, 0x6A100000, 0xD4200000,
    0x0000AA51, 0x00004483, 0x00008906, 0x0000022D, 0x0000045A, 0x000008B4, 0x00001168, 0x000022D0,
    0xAA510000, 0x44830000, 0x89060000, 0x022D0000, 0x045A0000, 0x08B40000, 0x11680000, 0x22D00000,
)

UID2_TABLE = (
    0x000076B4, 0x0000ED68, 0x0000CAF1, 0x000085C3, 0x00001BA7, 0x0000374E, 0x00006E9C, 0x0000DD38,
    0x76B40000, 0xED680000, 0xCAF10000, 0x85C30000, 0x1BA70000, 0x374E0000, 0x6E9C0000, 0xDD380000,
    0x00003730, 0x00006E60, 0x0000DCC0, 0x0000A9A1, 0x00004363, 0x000086C6, 0x00001DAD, 0x00003B5A,
    0x37300000, 0x6E600000, 0xDCC00000, 0xA9A10000, 0x43630000, 0x86C60000, 0x1DAD0000, 0x3B5A0000,
)

UID3_TABLE = (
    0x00003331, 0x00006662, 0x0000CCC4, 0x000089A9, 0x00000373, 0x000006E6, 0x00000DCC, 0x00001B98,
    0x33310000, 0x66620000, 0xCCC40000, 0x89A90000, 0x03730000, 0x06E60000, 0x0DCC0000, 0x1B980000,
    0x00001021, 0x00002042, 0x00004084, 0x00008108, 0x00001231, 0x00002462, 0x000048C4, 0x00009188,
    0x10210000, 0x20420000, 0x40840000, 0x81080000, 0x12310000, 0x24620000, 0x48C40000, 0x91880000,
)


def checkuid(uid1, uid2, uid3):
    result = 0
    for bit in range(32):
        mask = 1 << bit
        if uid1 & mask:
            result ^= UID1_TABLE[bit]
        if uid2 & mask:
            result ^= UID2_TABLE[bit]
        if uid3 & mask:
            result ^= UID3_TABLE[bit]

    return result


class CheckUidField(fields.StructField):
    """32 bits checksum of the three UIDs preceding it into the header."""

    def __init__(self, fields, *args, **kwargs):
        super().__init__('I', *args, **kwargs)
        self.fields = fields

    def calculate(self):
        return checkuid(*[int(getattr(self.father, _).value) for _ in self.fields])

    def is_valid(self):
        return self.value == self.calculate()
