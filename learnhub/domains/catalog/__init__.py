# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalog facts consumed by the learning core."""

from learnhub.domains.catalog.service import (
    CatalogError,
    CourseCatalog,
    CourseNotFoundError,
)

__all__ = [
    "CatalogError",
    "CourseCatalog",
    "CourseNotFoundError",
]
