#!/usr/bin/env python3
"""
Texture providers.

The render pipeline asks a provider for a body's texture key and gets back a
square pygame Surface, or None to fall back to the gradient disk. Pixels are
never generated here.
"""
import logging
import os
from typing import Dict, Optional, Protocol

import pygame

logger = logging.getLogger(__name__)


class TextureProvider(Protocol):
    def get(self, key: Optional[str]) -> Optional[pygame.Surface]:
        ...


class NullTextureProvider:
    """Every body uses the gradient fallback."""

    def get(self, key: Optional[str]) -> Optional[pygame.Surface]:
        return None


class ImageDirectoryTextures:
    """
    Loads '<key>.png' from a directory on first use and caches the result.

    Missing or unreadable files are cached as None so the warning is logged once.
    """

    def __init__(self, directory: str):
        self.directory = directory
        self._cache: Dict[str, Optional[pygame.Surface]] = {}

    def get(self, key: Optional[str]) -> Optional[pygame.Surface]:
        if not key:
            return None
        if key not in self._cache:
            self._cache[key] = self._load(key)
        return self._cache[key]

    def _load(self, key: str) -> Optional[pygame.Surface]:
        path = os.path.join(self.directory, f"{key}.png")
        if not os.path.isfile(path):
            logger.debug("No texture for '%s' in %s", key, self.directory)
            return None
        try:
            image = pygame.image.load(path)
        except (pygame.error, OSError) as exc:
            logger.warning("Failed to load texture %s: %s", path, exc)
            return None
        if pygame.display.get_init() and pygame.display.get_surface() is not None:
            image = image.convert_alpha()
        side = min(image.get_width(), image.get_height())
        if image.get_width() != image.get_height():
            image = image.subsurface(pygame.Rect(0, 0, side, side)).copy()
        return image
