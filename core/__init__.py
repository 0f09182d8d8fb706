"""core/ -- Kernel shared by every layer: configuration, database engine, error taxonomy."""
