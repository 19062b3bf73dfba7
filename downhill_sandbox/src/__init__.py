"""Source subpackages for the downhill sandbox."""
