# exam_core/common/models.py
from __future__ import annotations

import random
import string
import time
import uuid

from django.db import models


class TimeStampedModel(models.Model):
    """
    Standard timestamps for all entities.
    """
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


_BASE36 = string.digits + string.ascii_lowercase


def time_random_id(prefix: str) -> str:
    """
    `<prefix>_<epoch-ms>_<9 base36 chars>` (e.g. sess_1735689600000_k3j9x0a1b).
    Collision-resistant at clinic scale, not globally unique.
    """
    suffix = "".join(random.choices(_BASE36, k=9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


def prefixed_uuid(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4()}"
