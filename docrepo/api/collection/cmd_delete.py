"""Delete a document by id command."""

from collections.abc import Iterator

from ..StageResult import StageResult
from . import CollectionDeleteOutput


def cmd_delete(collection: str, id: str) -> StageResult:
    """Delete the document with ``id`` from ``collection``."""

    def do_work(result_obj: StageResult) -> Iterator[tuple[float, str]]:
        from ..config.DocRepoConfig import DocRepoConfig
        from ._open_repository import _open_repository
        from ._resolve_key import _resolve_key

        yield (0.2, "Loading configuration...")
        try:
            config = DocRepoConfig.load()
            yield (0.6, f"Deleting {id}...")
            with _open_repository(config, collection) as repository:
                deleted = repository.delete(_resolve_key(repository, id))
                error = repository.last_error_message
        except Exception as e:
            deleted, error = False, str(e)

        yield (1.0, "Complete")
        result_obj.output = CollectionDeleteOutput(
            errors=[] if deleted else [error], collection=collection, id=id, deleted=deleted
        ).model_dump(mode="python")
        result_obj.result = f"Deleted {id} from {collection}" if deleted else f"Delete failed: {error}"
        result_obj.success = deleted

    return StageResult(
        announce=f"Deleting document from {collection}...",
        progress_callback=do_work,
    )
