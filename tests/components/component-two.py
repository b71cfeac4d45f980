def register(registration, config, path):
    registration.component([
        "component-one",
        lambda one: {"name": "component-two", "one": one},
    ])
