from dataclasses import dataclass
from typing import Any

from componentry import Descriptor


@dataclass(frozen=True)
class ChainedDescriptor(Descriptor):
    one: Any = None


def build(three, two):
    return {"name": "provider-two", "three": three, "two": two}


def register(registration, config, path):
    registration.provider([
        "provider-one",
        lambda one: ChainedDescriptor(["component-three", "factory-two", build], one=one),
    ])
