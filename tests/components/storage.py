def register(registration, config, path):
    registration.alias("backends/memory")
