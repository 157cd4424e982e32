"""JSON document reader for raw entries and billing configurations.

The engine receives records already scoped to one tenant and one reporting
period. This module turns exported documents (camelCase keys, as stored by
the fleet app) into validated models.

Entry files hold either a list of entry documents or an object with an
``entries`` list. Configuration files hold a single billing configuration
document; missing sections fall back to the defaults.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Union

from pydantic import ValidationError

from eph_billing.models.billing_config import BillingConfig
from eph_billing.models.entry import RawEntry

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_document(path: PathLike) -> Any:
    """Load a JSON document from disk.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON
    """
    path = Path(path)
    logger.debug(f"Loading JSON document {path}")
    with path.open(encoding="utf-8") as handle:
        try:
            return json.load(handle)
        except json.JSONDecodeError as e:
            raise ValueError(f"{path} is not valid JSON: {e}") from e


def parse_raw_entries(documents: Iterable[Mapping[str, Any]]) -> List[RawEntry]:
    """Validate entry documents into RawEntry models.

    Args:
        documents: Entry documents with camelCase or snake_case keys

    Returns:
        List of RawEntry objects, in input order

    Raises:
        ValidationError: If a document is not a valid entry; the failing
            document index is logged
    """
    entries = []
    for index, document in enumerate(documents):
        try:
            entries.append(RawEntry.model_validate(document))
        except ValidationError:
            logger.error(f"Entry document #{index} failed validation")
            raise
    return entries


def read_raw_entries(path: PathLike) -> List[RawEntry]:
    """Read raw entries from a JSON file.

    Example:
        >>> entries = read_raw_entries("march-2024.json")
        >>> entries[0].subject_key
        'EX-01'
    """
    document = load_document(path)
    if isinstance(document, Mapping):
        document = document.get("entries", [])
    if not isinstance(document, list):
        raise ValueError(f"{path} must contain a list of entries")

    entries = parse_raw_entries(document)
    logger.info(f"Read {len(entries)} raw entries from {path}")
    return entries


def read_billing_config(path: PathLike) -> BillingConfig:
    """Read a billing configuration from a JSON file.

    The document is used as stored; see :meth:`BillingConfig.from_document`.
    """
    document = load_document(path)
    if not isinstance(document, Mapping):
        raise ValueError(f"{path} must contain a billing configuration object")

    config = BillingConfig.from_document(document)
    logger.info(f"Read billing configuration from {path}: {config.summary()}")
    return config
