'''
# Section bodies

Every document is a collection of sections located through the section table
(or the jump table for the picture containers). Here there are the decoders
for the bodies that the assemblers aggregate.
'''
