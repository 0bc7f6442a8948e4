# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Classifier protocol."""

from collections.abc import Mapping
from typing import Any, Protocol

from ..models import Fragment


class Classifier(Protocol):
    """Semantic vulnerability classifier for a single code fragment.

    Implementations return the raw structured judgment and raise
    ClassificationError (or any other exception) when no judgment is available.
    """

    async def classify(self, fragment: Fragment) -> Mapping[str, Any]: ...
