#!/usr/bin/env python3
"""
Display toggles read by the update step and the render pipeline every frame.
"""
from dataclasses import dataclass, fields
from typing import List


@dataclass
class Settings:
    show_orbits: bool = True
    show_trails: bool = True
    show_labels: bool = False
    show_glow: bool = True
    show_debug: bool = False
    show_prediction: bool = True
    show_lens_flare: bool = True
    show_milky_way: bool = True
    show_dwarf_planets: bool = False
    show_moons: bool = False
    show_inclination: bool = False
    distance_ruler: bool = False
    realistic_scale: bool = False

    @classmethod
    def names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    def set(self, name: str, value: bool) -> None:
        if name not in self.names():
            raise KeyError(f"unknown setting: {name}")
        setattr(self, name, bool(value))

    def toggle(self, name: str) -> bool:
        self.set(name, not getattr(self, name))
        return getattr(self, name)
