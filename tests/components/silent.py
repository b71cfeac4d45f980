def register(registration, config, path):
    pass
