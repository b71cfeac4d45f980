def register(registration, config, path):
    registration.component(lambda: {"name": "component-one"})
