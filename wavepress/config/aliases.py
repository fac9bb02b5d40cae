# Type aliases
QualitySweep = int | tuple[int, ...] | list[int] | range
