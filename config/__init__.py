"""
config package
--------------

Filesystem locations (`paths`) and the JSON constants file read by
`utils.constants`.
"""
