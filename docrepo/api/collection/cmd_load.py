"""Load a document by id command."""

import json
from collections.abc import Iterator

from ..StageResult import StageResult
from . import CollectionLoadOutput


def cmd_load(collection: str, id: str) -> StageResult:
    """Load one document of ``collection`` by its id."""

    def do_work(result_obj: StageResult) -> Iterator[tuple[float, str]]:
        from ..config.DocRepoConfig import DocRepoConfig
        from ._open_repository import _open_repository
        from ._resolve_key import _resolve_key

        yield (0.2, "Loading configuration...")
        try:
            config = DocRepoConfig.load()
            yield (0.6, f"Loading {id}...")
            with _open_repository(config, collection) as repository:
                text = repository.load_json(_resolve_key(repository, id))
                error = repository.last_error_message
        except Exception as e:
            text, error = None, str(e)

        yield (1.0, "Complete")
        if text is None:
            result_obj.result = f"Failed to load {id}: {error}"
            result_obj.output = CollectionLoadOutput(
                errors=[error], collection=collection, id=id, document=None
            ).model_dump(mode="python")
            result_obj.success = False
            return

        result_obj.result = f"Loaded {id} from {collection}"
        result_obj.output = CollectionLoadOutput(collection=collection, id=id, document=json.loads(text)).model_dump(
            mode="python"
        )
        result_obj.success = True

    return StageResult(
        announce=f"Loading document from {collection}...",
        progress_callback=do_work,
    )
