"""
Fetch-and-project steps shared by the views.

Errors are recorded through AppState so a failed batch leaves nothing drawn.
"""

import asyncio
import logging
import warnings
from typing import TYPE_CHECKING, Optional, Sequence

import streamlit as st

from vector_muse.core.batch import EmbeddingBatch
from vector_muse.core.errors import (
    FetchSuperseded,
    ProviderError,
    RankDeficientProjection,
    VectorMuseError,
)
from vector_muse.core.projector import Projection, aproject
from vector_muse.ui.state import AppState
from vector_muse.ui.styles import render_error
import config

if TYPE_CHECKING:
    from vector_muse.embedders.fetcher import BatchFetcher

logger = logging.getLogger(__name__)


def parse_word_list(text: str) -> list[str]:
    """Split on newlines and commas, strip, drop blanks and repeats."""
    words = []
    for line in text.replace(",", "\n").splitlines():
        word = line.strip()
        if word and word not in words:
            words.append(word)
    return words


def fetch_batch(
    fetcher: "BatchFetcher",
    texts: Sequence[str],
    labels: Optional[Sequence[str]] = None,
) -> Optional[EmbeddingBatch]:
    """
    Embed texts with a progress bar.

    Returns:
        The batch, or None after recording the error
    """
    AppState.clear_error()
    progress_bar = st.progress(0.0)
    status_text = st.empty()

    def update_progress(msg: str):
        status_text.text(msg)
        try:
            current, total = msg.split()[-1].split("/")
            progress_bar.progress(int(current) / int(total))
        except (ValueError, IndexError):
            pass

    try:
        return fetcher.fetch_sync(texts, labels, progress_callback=update_progress)
    except ProviderError as e:
        logger.warning(f"Embedding batch failed: {e}")
        AppState.set_error(str(e))
    except FetchSuperseded:
        logger.info("Embedding batch superseded")
    except VectorMuseError as e:
        AppState.set_error(str(e))
    except Exception as e:
        logger.exception("Embedding batch failed")
        AppState.set_error(f"Embedding failed: {e}")
    finally:
        progress_bar.empty()
        status_text.empty()

    if AppState.has_error():
        render_error(st.session_state.last_error)
    return None


def project_batch(batch: EmbeddingBatch, target_dims: int = config.PCA_N_COMPONENTS) -> Projection:
    """
    Project a batch; rank deficiency is reported on the result, not as a warning.

    Batches over MAX_SYNC_BATCH are projected in a worker thread (see aproject).
    """
    if len(batch) > config.MAX_SYNC_BATCH:
        logger.info(f"Batch of {len(batch)} exceeds {config.MAX_SYNC_BATCH} texts; projecting off-thread")
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", RankDeficientProjection)
        return asyncio.run(aproject(batch.vectors, target_dims))
