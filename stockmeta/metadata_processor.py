"""
StockMeta - Metadata Processor
Orchestrates the completion calls for each filename and fans them out over a batch.

Per item:
  Adobe Stock:   title + keywords (concurrent) -> category(keywords) -> AdobeRecord
  Shutterstock:  description + keywords (concurrent) -> categories(keywords) -> ShutterstockRecord

An AuthError anywhere aborts the batch; any other failure only fails its item.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed

from stockmeta.ai_providers import DEFAULT_MODEL, DEFAULT_PROVIDER, CompletionClient
from stockmeta.errors import AuthError, ValidationError
from stockmeta.prompt_builder import (
    PLATFORM_ADOBE, PLATFORM_TASKS, PLATFORMS,
    TASK_CATEGORY, TASK_DESCRIPTION, TASK_KEYWORDS, TASK_TITLE,
    build_prompt, get_task_params,
)
from stockmeta.records import AdobeRecord, BatchResult, ItemError, ShutterstockRecord
from stockmeta.sanitizer import (
    ADOBE_MAX_KEYWORDS, SHUTTERSTOCK_MAX_KEYWORDS,
    sanitize_category, sanitize_keywords, sanitize_shutterstock_category, sanitize_title,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


# ─── Validation ───────────────────────────────────────────────────────────────

def validate_platform(platform):
    if platform not in PLATFORMS:
        raise ValidationError(f"Unknown platform: {platform!r} (expected one of {', '.join(PLATFORMS)})")


def validate_filenames(filenames):
    """Reject anything but a non-empty list of non-empty strings."""
    if not isinstance(filenames, (list, tuple)):
        raise ValidationError("filenames must be an array")
    if not filenames:
        raise ValidationError("filenames must not be empty")
    for i, name in enumerate(filenames):
        if not isinstance(name, str) or not name.strip():
            raise ValidationError(f"filenames[{i}] must be a non-empty string")


def validate_credential(credential):
    if not credential or not str(credential).strip():
        raise AuthError("API key is required. Please set it in Settings.")


# ─── Single Task ──────────────────────────────────────────────────────────────

def _run_task(client, platform, task, filename, context=None):
    system_prompt, user_prompt = build_prompt(task, filename, platform, context)
    params = get_task_params(platform, task)
    return client.complete(system_prompt, user_prompt, **params)


def _sanitize_task_output(platform, task, raw):
    if task in (TASK_TITLE, TASK_DESCRIPTION):
        return sanitize_title(raw)
    if task == TASK_KEYWORDS:
        if platform == PLATFORM_ADOBE:
            return sanitize_keywords(raw, ADOBE_MAX_KEYWORDS, strict=True)
        return sanitize_keywords(raw, SHUTTERSTOCK_MAX_KEYWORDS, strict=False)
    if platform == PLATFORM_ADOBE:
        return sanitize_category(raw)
    return sanitize_shutterstock_category(raw)


def _generate_text_and_keywords(filename, client, platform):
    """Run the text and keyword calls concurrently; neither depends on the other."""
    text_task = TASK_TITLE if platform == PLATFORM_ADOBE else TASK_DESCRIPTION
    with ThreadPoolExecutor(max_workers=2) as pool:
        text_future = pool.submit(_run_task, client, platform, text_task, filename)
        keywords_future = pool.submit(_run_task, client, platform, TASK_KEYWORDS, filename)
        raw_text = text_future.result()
        raw_keywords = keywords_future.result()
    return (
        _sanitize_task_output(platform, text_task, raw_text),
        _sanitize_task_output(platform, TASK_KEYWORDS, raw_keywords),
    )


# ─── Item Generator ───────────────────────────────────────────────────────────

def generate_item(filename, client, platform):
    """
    Generate a complete record for one filename.

    Args:
        filename: Asset filename, used verbatim in prompts and as record key
        client: Object with complete(system, user, temperature, max_tokens) -> str
        platform: "adobe" or "shutterstock"

    Returns:
        AdobeRecord or ShutterstockRecord

    Raises:
        AuthError: credential rejected (caller aborts the batch)
        ProviderError: provider failure for this item
    """
    text, keywords = _generate_text_and_keywords(filename, client, platform)
    raw_category = _run_task(client, platform, TASK_CATEGORY, filename, context=keywords)
    category = _sanitize_task_output(platform, TASK_CATEGORY, raw_category)

    if platform == PLATFORM_ADOBE:
        return AdobeRecord(filename=filename, title=text, keywords=keywords, category=category, releases="")

    return ShutterstockRecord(
        filename=filename,
        description=text,
        keywords=keywords,
        categories=category,
        editorial="No",
        mature_content="No",
        illustration="Yes",
    )


def regenerate_field(filename, field, client, platform, keywords=None):
    """
    Regenerate a single sanitized field for an existing record.

    Args:
        filename: Asset filename
        field: "title"/"keywords"/"category" (Adobe) or "description"/"keywords"/"category" (Shutterstock)
        client: Completion client
        platform: "adobe" or "shutterstock"
        keywords: Current keyword string, used as context for "category".
                  Fresh keywords are generated first when omitted.

    Returns:
        The sanitized field value (str, or int for the Adobe category)
    """
    validate_platform(platform)
    if field not in PLATFORM_TASKS[platform]:
        raise ValidationError(f"Field {field!r} cannot be regenerated for {platform}")

    if field == TASK_CATEGORY:
        if not keywords:
            keywords = _sanitize_task_output(
                platform, TASK_KEYWORDS, _run_task(client, platform, TASK_KEYWORDS, filename))
        else:
            keywords = _sanitize_task_output(platform, TASK_KEYWORDS, keywords)
        raw = _run_task(client, platform, TASK_CATEGORY, filename, context=keywords)
    else:
        raw = _run_task(client, platform, field, filename)

    return _sanitize_task_output(platform, field, raw)


# ─── Batch Orchestrator ───────────────────────────────────────────────────────

class _AbortGuard:
    """Client wrapper that refuses further calls once the batch has been aborted."""

    def __init__(self, client, abort_event):
        self._client = client
        self._abort = abort_event

    def complete(self, system, user, **params):
        if self._abort.is_set():
            raise AuthError("Batch aborted: API key was rejected")
        return self._client.complete(system, user, **params)


def _run_item(filename, client, platform, abort_event):
    try:
        return generate_item(filename, _AbortGuard(client, abort_event), platform)
    except AuthError:
        # set from the worker thread, before it can pick up a queued item
        abort_event.set()
        raise


def generate(filenames, credential, platform, client=None, max_workers=DEFAULT_MAX_WORKERS,
             provider_name=DEFAULT_PROVIDER, model=DEFAULT_MODEL, on_progress=None):
    """
    Generate metadata for every filename in the batch.

    Args:
        filenames: Non-empty list of filenames (duplicates are processed independently)
        credential: Provider API key
        platform: "adobe" or "shutterstock"
        client: Completion client; built from credential/provider/model when omitted
        max_workers: Upper bound on items processed at once
        provider_name: Provider used when no client is given
        model: Model used when no client is given
        on_progress: Callback(done, total) after each item settles

    Returns:
        BatchResult with records and errors, each in input order

    Raises:
        ValidationError: bad filenames or platform (nothing is sent)
        AuthError: missing credential (nothing is sent) or credential rejected mid-batch
    """
    validate_filenames(filenames)
    validate_platform(platform)
    validate_credential(credential)

    if client is None:
        client = CompletionClient(credential, provider_name=provider_name, model=model)

    total = len(filenames)
    results = [None] * total
    logger.info("Generating %s metadata for %d file(s)", platform, total)

    abort = threading.Event()
    pool = ThreadPoolExecutor(max_workers=max(1, min(max_workers, total)))
    try:
        futures = {pool.submit(_run_item, name, client, platform, abort): i for i, name in enumerate(filenames)}
        done = 0
        for future in as_completed(futures):
            i = futures[future]
            try:
                results[i] = future.result()
                logger.info("Done: %s", filenames[i])
            except AuthError:
                raise
            except Exception as e:
                logger.error("Error (%s): %s", filenames[i], e)
                results[i] = ItemError(filename=filenames[i], reason=str(e) or e.__class__.__name__)
            done += 1
            if on_progress:
                on_progress(done, total)
    except AuthError:
        abort.set()
        logger.error("Credential rejected, aborting batch of %d", total)
        raise
    finally:
        # in-flight items stop at their next call; don't wait for them after an abort
        pool.shutdown(wait=not abort.is_set(), cancel_futures=True)

    batch = BatchResult()
    for result in results:
        if isinstance(result, ItemError):
            batch.errors.append(result)
        else:
            batch.records.append(result)

    usage = getattr(client, "usage", None)
    if usage is not None:
        batch.usage = usage.snapshot()

    logger.info("Batch finished: %d record(s), %d error(s)", len(batch.records), len(batch.errors))
    return batch
