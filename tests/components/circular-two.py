def register(registration, config, path):
    registration.component([
        "circular-one",
        lambda one: {"name": "circular-two", "one": one},
    ])
