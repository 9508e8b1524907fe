"""
Foldscan CLI - command line entry points
"""
