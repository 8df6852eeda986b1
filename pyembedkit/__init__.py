"""
pyembedkit - install the Windows embeddable Python distribution from a local tool cache.
"""
