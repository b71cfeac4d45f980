def register(registration, config, path):
    registration.component([
        "circular-runtime-one",
        lambda one: {"name": "circular-runtime-two", "one": one},
    ])
