"""
Parameters of a field that are known only while decoding: the number of
entries of a table, the number of bytes of a string and so on.

    class JumpTableSection(Chunk):
        count   = fields.StructField('I')
        entries = fields.ArrayField(fields.StructField('I'), n=Dependency('.count'))

A path starting with '.' is looked up among the siblings of the field, any
other path starts from the outermost chunk.
"""
import logging


logger = logging.getLogger(__name__)


def get_root_from_chunk(field):
    while field.father is not None:
        field = field.father

    return field


class Dependency:
    '''Value of another field, resolved when it is needed.'''

    def __init__(self, expression):
        self.expression = expression

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    def resolve_field(self, instance):
        if self.expression.startswith('.'):
            start, path = instance.father, self.expression[1:]
        else:
            start, path = get_root_from_chunk(instance), self.expression

        target = start
        for component in path.split('.'):
            target = getattr(target, component)

        return target

    def resolve(self, instance):
        target = self.resolve_field(instance)
        value = target() if callable(target) else target.value

        logger.debug('%s of %s resolved to %r', self.expression, instance.name, value)

        return value


class RatioDependency(Dependency):
    '''The value of the field divided by ratio (rounding toward zero).'''

    def __init__(self, ratio, expression):
        super().__init__(expression)
        self.ratio = ratio

    def resolve(self, instance):
        return int(super().resolve(instance) / self.ratio)


class PropertyDescriptor(object):
    """Attribute of a field holding either a plain value of the given type
    or a Dependency resolved each time it's read."""

    def __init__(self, name: str, _type: type):
        self.name = name
        self.type = _type

    def __get__(self, instance, owner):
        if instance is None:
            return self

        try:
            value = instance.__dict__[self.name]
        except KeyError:
            raise AttributeError(f"'{self.name}' was never set on {instance.__class__.__name__}") from None

        return value.resolve(instance) if isinstance(value, Dependency) else value

    def __set__(self, instance, value):
        if not isinstance(value, (self.type, Dependency)):
            raise ValueError(f"'{self.name}' must be of type {self.type.__name__} or a Dependency, not {value!r}")

        instance.__dict__[self.name] = value
