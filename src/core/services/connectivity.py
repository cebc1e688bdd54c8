"""PSA connectivity probe.

Autotask answers a bad credential with an unhelpful error on the first real
query, so one lightweight authenticated call is made before any dependent
query.
"""

from __future__ import annotations

import logging

import httpx

from core.errors import PsaApiError
from core.interfaces.collaborators import PsaClient

logger = logging.getLogger(__name__)


async def probe_psa(psa: PsaClient) -> bool:
    """Return whether the PSA credentials are usable. Never raises."""

    try:
        status = await psa.probe()
    except PsaApiError as exc:
        if exc.is_unauthorized:
            logger.error("API Key Unauthorized. (%s)", exc.detail)
        else:
            logger.error("PSA connectivity check failed: %s", exc.detail)
        return False
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("PSA connectivity check failed: %s", exc)
        return False

    logger.info("Successfully connected to Autotask. (%s)", status)
    return True
