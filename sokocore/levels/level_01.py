"""
level_01.py — starter set, plain XSB rows
"""

LEVEL_DATA = """\
; Starter set
; Three warm-up levels

#####
#@$.#
#####
; Corridor

#####
#.  #
#$  #
#@  #
#####
; Straight up

######
#.   #
# $  #
#  @ #
######
; Around the corner
"""
