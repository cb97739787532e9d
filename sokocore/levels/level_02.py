"""
level_02.py — run-length encoded rows, ``|`` as the row separator
"""

LEVEL_DATA = """\
; Compressed corridor
5#|#@$.#|5#
; Corridor, RLE form
"""
