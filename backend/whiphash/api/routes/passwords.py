from __future__ import annotations

import logging
import math
import threading
from functools import partial

import anyio
import anyio.to_thread
from fastapi import APIRouter, Depends, HTTPException, Request, status

from whiphash.core.config import Settings, settings
from whiphash.crypto.errors import (
    InvalidInputError,
    KDFExecutionError,
    RandomSourceError,
)
from whiphash.crypto.pipeline import DerivationConfig, RandomPair, derive
from whiphash.schemas.password import DerivationParamsOut, PasswordOut, RandomnessIn
from whiphash.security.rate_limiter import RateLimiter, get_rate_limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/passwords', tags=['passwords'])


def get_settings() -> Settings:
    return settings


def _client_key(request: Request) -> str:
    return request.client.host if request.client else 'unknown'


@router.post('/generate', response_model=PasswordOut)
async def generate_password(
    payload: RandomnessIn,
    request: Request,
    cfg: Settings = Depends(get_settings),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> PasswordOut:
    client = _client_key(request)
    if not limiter.is_allowed(client):
        delay = limiter.get_retry_after(client)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f'Too many derivation requests. Try again in {int(math.ceil(delay))} seconds.',
            headers={'Retry-After': str(int(math.ceil(delay)))},
        )

    try:
        pair = RandomPair.from_decimal(payload.n1, payload.n2)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    config = DerivationConfig(params=cfg.hardening_params())
    cancel = threading.Event()
    job = partial(
        derive,
        pair,
        tx_hash=payload.tx_hash,
        sequence_number=payload.sequence_number,
        config=config,
        should_cancel=cancel.is_set,
    )

    # The worker thread is abandoned on timeout; it stops at the next cancellation checkpoint.
    try:
        with anyio.fail_after(cfg.derivation_timeout_seconds):
            result = await anyio.to_thread.run_sync(job, abandon_on_cancel=True)
    except TimeoutError:
        cancel.set()
        logger.warning('Derivation timed out after %.1fs tx=%s', cfg.derivation_timeout_seconds, payload.tx_hash)
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail='Password derivation timed out')
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (RandomSourceError, KDFExecutionError) as e:
        logger.error('Derivation environment failure tx=%s: %s', payload.tx_hash, type(e).__name__)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail='Password derivation unavailable',
        )

    return PasswordOut.model_validate(result.to_dict())


@router.get('/params', response_model=DerivationParamsOut)
def derivation_params(cfg: Settings = Depends(get_settings)) -> DerivationParamsOut:
    params = cfg.hardening_params()
    return DerivationParamsOut(
        primitive=params.type,
        memory=params.memory_cost,
        time=params.time_cost,
        parallelism=params.parallelism,
        hash_len=params.hash_len,
        salt_len=params.salt_len,
    )
