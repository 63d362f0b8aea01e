"""Core building blocks: configuration, paths, sizes and theming."""
