"""Show collection documents command."""

import json
from collections.abc import Iterator

from ..repository.errors import ParseError
from ..StageResult import StageResult
from . import CollectionShowOutput


def cmd_show(
    collection: str,
    query: str | None = None,
    skip: int = 0,
    limit: int = 50,
) -> StageResult:
    """Show documents of a collection matching a mongo shell query string.

    Args:
        collection: Collection name
        query: Query string, e.g. ``{ name: 'Alice' }`` (default: all documents)
        skip: Number of documents to skip
        limit: Maximum number of documents to return
    """
    query_text = query or "{}"

    def _fail(result_obj: StageResult, message: str, error: str) -> None:
        result_obj.result = message
        result_obj.output = CollectionShowOutput(
            errors=[error],
            collection=collection,
            query=query_text,
            skip=skip,
            limit=limit,
            count=0,
            results=[],
        ).model_dump(mode="python")
        result_obj.success = False

    def do_work(result_obj: StageResult) -> Iterator[tuple[float, str]]:
        from ..config.DocRepoConfig import DocRepoConfig
        from ._open_repository import _open_repository

        yield (0.2, "Loading configuration...")
        try:
            config = DocRepoConfig.load()
        except Exception as e:
            yield (1.0, "Complete")
            _fail(result_obj, str(e), str(e))
            return

        yield (0.6, "Querying collection...")
        try:
            with _open_repository(config, collection) as repository:
                text = repository.find_from_string_json(query_text, skip=skip, limit=limit)
                if text is None:
                    raise RuntimeError(repository.last_error_message)
        except ParseError as e:
            yield (1.0, "Complete")
            _fail(result_obj, f"Invalid query: {e}", str(e))
            return
        except Exception as e:
            yield (1.0, "Complete")
            _fail(result_obj, f"Query failed: {e}", str(e))
            return

        results = json.loads(text)
        yield (1.0, "Complete")
        result_obj.result = f"Found {len(results)} document(s) in {collection}"
        result_obj.output = CollectionShowOutput(
            collection=collection,
            query=query_text,
            skip=skip,
            limit=limit,
            count=len(results),
            results=results,
        ).model_dump(mode="python")
        result_obj.success = True

    return StageResult(
        announce=f"Querying {collection} collection...",
        progress_callback=do_work,
    )
