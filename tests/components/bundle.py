def make_greeting(name):
    return f"Hello, {name}!"


def register_greeting(registration, config, path):
    registration.factory(["value", make_greeting])


descriptors = {"greeting": register_greeting}
