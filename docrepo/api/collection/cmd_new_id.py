"""Generate a new document id command."""

from collections.abc import Iterator

from ..repository.generate_id import generate_id
from ..StageResult import StageResult
from . import CollectionNewIdOutput


def cmd_new_id() -> StageResult:
    """Generate a new unique document id."""

    def do_work(result_obj: StageResult) -> Iterator[tuple[float, str]]:
        new_id = generate_id()
        yield (1.0, "Complete")
        result_obj.result = f"Generated id {new_id}"
        result_obj.output = CollectionNewIdOutput(id=new_id).model_dump(mode="python")
        result_obj.success = True

    return StageResult(
        announce="Generating id...",
        progress_callback=do_work,
    )
