def register(registration, config, path):
    registration.factory(lambda: {"name": "factory-one"})
