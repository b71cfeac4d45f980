def register(registration, config, path):
    registration.value({"host": config["host"], "path": path})
