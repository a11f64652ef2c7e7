'''
# Pictures

Sketch documents, multi bitmap files and clipart files all store their images
as "paint data sections": a small header followed by the pixel data, possibly
run-length encoded, with rows aligned to 32 bits.
'''
