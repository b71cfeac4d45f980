def register(registration, config, path):
    registration.factory([
        "component-three",
        "factory-one",
        lambda three, one: {"name": "factory-two", "three": three, "one": one},
    ])
