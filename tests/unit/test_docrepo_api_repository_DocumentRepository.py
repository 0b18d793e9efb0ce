"""DocumentRepository coverage with the mongomock backend (no mocks)."""

import json

import pytest
from bson import ObjectId
from pydantic import BaseModel, Field

from docrepo.api.database.Context import Context
from docrepo.api.repository.DocumentRepository import DocumentRepository, default_collection_name
from docrepo.api.repository.Entity import Entity
from docrepo.api.repository.errors import DocumentNotFoundError, EntityValidationError, ParseError
from tests.unit.conftest import User


class Member(Entity):
    collection_name = "club_members"

    name: str
    age: int = Field(0, ge=0)


class Widget(Entity):
    label: str


class TestConstruction:
    def test_default_collection_is_pluralized_type_name(self, users):
        assert users.collection_name == "Users"
        assert users.collection.name == "Users"

    def test_declared_collection_name_wins(self, context):
        with DocumentRepository(Member, context=context) as members:
            assert members.collection_name == "club_members"

    def test_explicit_collection_name(self, context):
        with DocumentRepository(User, collection_name="people", context=context) as repository:
            assert repository.collection.name == "people"

    def test_collection_created_when_missing(self, context):
        assert "Users" not in context.list_collection_names()
        with DocumentRepository(User, context=context):
            assert "Users" in context.list_collection_names()

    def test_raw_documents_require_collection_name(self, context):
        with pytest.raises(ValueError, match="collection_name is required"):
            DocumentRepository(dict, context=context)

    def test_shared_open_context_is_left_open(self, context):
        repository = DocumentRepository(User, context=context)
        repository.close()
        assert context.is_open

    def test_unopened_context_is_opened_and_owned(self, database_config):
        context = Context(database_config)
        with DocumentRepository(User, context=context) as repository:
            assert context.is_open
            assert repository.database.name == database_config.name
        assert not context.is_open

    def test_reads_database_from_config(self, docrepo_config):
        with DocumentRepository(User) as repository:
            assert repository.database.name == docrepo_config.database.name

    def test_database_name_override(self, docrepo_home):
        with DocumentRepository(User, database_name="docrepo_test_override") as repository:
            assert repository.database.name == "docrepo_test_override"

    def test_connection_string_requires_database_name(self):
        with pytest.raises(ValueError, match="database_name is required"):
            DocumentRepository(User, connection_string="mongodb://localhost:27017")

    def test_initialize_hook_runs_after_collection_is_open(self, context):
        class SeededUsers(DocumentRepository[User]):
            def initialize(self):
                self.seeded = self.collection.name

        with SeededUsers(User, context=context) as repository:
            assert repository.seeded == "Users"


class TestDefaultCollectionName:
    def test_pluralizes_class_name(self):
        assert default_collection_name(User) == "Users"
        assert default_collection_name(Widget) == "Widgets"

    def test_uses_declared_name(self):
        assert default_collection_name(Member) == "club_members"

    def test_dict_is_rejected(self):
        with pytest.raises(ValueError):
            default_collection_name(dict)


class TestSaveAndLoad:
    def test_save_then_load_returns_equal_entity(self, users):
        user = User(id="u1", name="Alice", age=30)
        assert users.save(user) is True
        assert users.load("u1") == user

    def test_scenario_save_load_delete_load(self, users):
        assert users.save(User(id="u1", name="Alice")) is True

        loaded = users.load("u1")
        assert loaded is not None
        assert loaded.id == "u1"
        assert loaded.name == "Alice"

        assert users.delete("u1") is True
        assert users.load("u1") is None
        assert users.last_error_message == "No match found."

    def test_save_upserts_by_id(self, users):
        users.save(User(id="u1", name="Alice"))
        users.save(User(id="u1", name="Alicia"))
        assert users.collection.count_documents({}) == 1
        assert users.load("u1").name == "Alicia"

    def test_save_generates_id_when_not_given(self, users):
        user = User(name="Carol")
        assert ObjectId.is_valid(user.id)
        users.save(user)
        assert users.load(user.id) == user

    def test_save_none_raises_and_leaves_error_unset(self, users):
        with pytest.raises(EntityValidationError, match="Entity has to be passed in."):
            users.save(None)
        assert users.last_error_message == ""
        assert not users.last_error

    def test_save_none_is_a_value_error(self, users):
        with pytest.raises(ValueError):
            users.save(None)

    def test_load_missing_records_no_match(self, users):
        assert users.load("nonexistent-id") is None
        assert users.last_error_message == "No match found."
        assert isinstance(users.error_exception, DocumentNotFoundError)
        assert str(users) == "Error: No match found."

    @pytest.mark.parametrize("key", ["", None, True, 1.5, ["u1"]])
    def test_load_invalid_key(self, users, key):
        assert users.load(key) is None
        assert users.last_error_message == "Couldn't load entity - invalid key provided."

    def test_load_int_key(self, context):
        with DocumentRepository(dict, collection_name="counters", context=context) as counters:
            counters.save_as({"_id": 7, "value": 1}, "counters")
            assert counters.load(7) == {"_id": 7, "value": 1}

    def test_success_does_not_clear_previous_error(self, users):
        users.save(User(id="u1", name="Alice"))
        users.load("missing")
        assert users.load("u1") is not None
        assert users.last_error_message == "No match found."

    def test_load_where_clears_previous_error(self, users):
        users.save(User(id="u1", name="Alice"))
        users.load("missing")
        found = users.load_where({"name": "Alice"})
        assert found.id == "u1"
        assert users.last_error_message == ""

    def test_load_where_accepts_query_string(self, users):
        users.save(User(id="u1", name="Alice"))
        assert users.load_where("{ name: 'Alice' }").id == "u1"

    def test_load_json_is_strict_json(self, users):
        users.save(User(id="u1", name="Alice", age=30))
        assert json.loads(users.load_json("u1")) == {"_id": "u1", "name": "Alice", "age": 30}

    def test_load_json_missing(self, users):
        assert users.load_json("missing") is None
        assert users.last_error_message == "No match found."

    def test_load_coerces_object_id_to_str(self, users):
        object_id = ObjectId()
        users.collection.insert_one({"_id": object_id, "name": "Dave"})
        dave = users.find_one({"name": "Dave"})
        assert dave.id == str(object_id)


class TestSaveHooks:
    def test_on_before_save_can_cancel(self, context):
        class ReadOnlyUsers(DocumentRepository[User]):
            def on_before_save(self, entity):
                return False

        with ReadOnlyUsers(User, context=context) as repository:
            assert repository.save(User(id="u1", name="Alice")) is False
            assert repository.last_error_message == "Save cancelled by on_before_save."
            assert repository.collection.count_documents({}) == 0

    def test_on_after_save_runs_after_write(self, context):
        saved = []

        class AuditedUsers(DocumentRepository[User]):
            def on_after_save(self, entity):
                saved.append(self.collection.count_documents({"_id": entity.id}))

        with AuditedUsers(User, context=context) as repository:
            repository.save(User(id="u1", name="Alice"))
        assert saved == [1]

    def test_auto_validate_rejects_invalid_entity(self, context):
        class ValidatedMembers(DocumentRepository[Member]):
            auto_validate = True

        member = Member(id="m1", name="Eve", age=20)
        member.age = -1
        with ValidatedMembers(Member, context=context) as members:
            assert members.save(member) is False
            assert isinstance(members.error_exception, EntityValidationError)
            assert members.collection.count_documents({}) == 0

    def test_validation_is_off_by_default(self, context):
        member = Member(id="m1", name="Eve")
        member.age = -1
        with DocumentRepository(Member, context=context) as members:
            assert members.save(member) is True

    def test_custom_validate(self, context):
        class NamedUsers(DocumentRepository[User]):
            auto_validate = True

            def validate(self, entity):
                if not entity.name.strip():
                    raise EntityValidationError("name must not be blank")

        with NamedUsers(User, context=context) as repository:
            assert repository.save(User(id="u1", name=" ")) is False
            assert repository.last_error_message == "name must not be blank"
            assert repository.save(User(id="u2", name="Bob")) is True

    def test_save_as_skips_hooks(self, context):
        class ReadOnlyUsers(DocumentRepository[User]):
            def on_before_save(self, entity):
                return False

        with ReadOnlyUsers(User, context=context) as repository:
            assert repository.save_as(User(id="u1", name="Alice")) is True
            assert repository.load("u1").name == "Alice"


class TestSaveAs:
    def test_default_collection_is_pluralized_type_of_entity(self, users):
        assert users.save_as(Widget(id="w1", label="gear")) is True
        assert users.database.get_collection("Widgets").find_one({"_id": "w1"}) == {"_id": "w1", "label": "gear"}

    def test_explicit_collection(self, users):
        assert users.save_as({"_id": "t1", "kind": "tag"}, "tags") is True
        assert users.database.get_collection("tags").count_documents({}) == 1

    def test_mapping_without_id_gets_generated_id(self, users):
        document = {"kind": "tag"}
        users.save_as(document, "tags")
        assert isinstance(document["_id"], ObjectId)

    def test_none_records_error(self, users):
        assert users.save_as(None) is False
        assert users.last_error_message == "No entity to save passed."


class TestSaveFromJson:
    def test_document_without_id_gets_object_id(self, users):
        result = users.save_from_json('{"name": "Bob"}')
        assert result.ok is True
        assert result.message == ""
        assert ObjectId.is_valid(result.id)
        assert users.collection.find_one({"_id": ObjectId(result.id)})["name"] == "Bob"

    def test_document_with_id_is_upserted(self, users):
        users.save(User(id="u1", name="Alice"))
        result = users.save_from_json("{ _id: 'u1', name: 'Alicia', age: 31 }")
        assert result.id == "u1"
        assert users.load("u1") == User(id="u1", name="Alicia", age=31)

    def test_extended_json_types_are_decoded(self, users):
        object_id = ObjectId()
        result = users.save_from_json(json.dumps({"_id": {"$oid": str(object_id)}, "name": "Bob"}))
        assert result.id == str(object_id)
        assert users.collection.count_documents({"_id": object_id}) == 1

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_blank_input(self, users, text):
        assert users.save_from_json(text) is None
        assert users.last_error_message == "No entity to save passed."

    def test_malformed_json_records_parse_error(self, users):
        assert users.save_from_json('{"name": ') is None
        assert isinstance(users.error_exception, ParseError)
        assert users.collection.count_documents({}) == 0

    def test_to_dict(self, users):
        result = users.save_from_json('{"_id": "x1"}')
        assert result.to_dict() == {"id": "x1", "ok": True, "message": ""}


class TestDelete:
    def test_delete_by_entity(self, users):
        user = User(id="u1", name="Alice")
        users.save(user)
        assert users.delete(user) is True
        assert users.load("u1") is None

    def test_delete_by_mapping(self, context):
        with DocumentRepository(dict, collection_name="tags", context=context) as tags:
            tags.save_as({"_id": "t1"}, "tags")
            assert tags.delete({"_id": "t1"}) is True
            assert tags.collection.count_documents({}) == 0

    def test_delete_none_is_noop(self, users):
        users.save(User(id="u1", name="Alice"))
        assert users.delete(None) is True
        assert users.collection.count_documents({}) == 1
        assert users.last_error_message == ""

    def test_delete_missing_id_succeeds(self, users):
        assert users.delete("nope") is True

    @pytest.mark.parametrize("key", ["", 1.5, object(), False])
    def test_delete_invalid_key(self, users, key):
        assert users.delete(key) is False
        assert users.last_error_message == "Couldn't delete entity - invalid key provided."


class TestFind:
    @pytest.fixture
    def people(self, users):
        for i, (name, age) in enumerate([("Alice", 30), ("Bob", 25), ("Carol", 41), ("Dave", 19), ("Eve", 35)]):
            users.save(User(id=f"u{i}", name=name, age=age))
        return users

    def test_find_one(self, people):
        assert people.find_one({"name": "Carol"}).id == "u2"

    def test_find_one_no_match_is_not_an_error(self, people):
        assert people.find_one({"name": "Zed"}) is None
        assert people.last_error_message == ""

    def test_find_one_as_dict(self, people):
        assert people.find_one_as(dict, {"_id": "u1"}) == {"_id": "u1", "name": "Bob", "age": 25}

    def test_find(self, people):
        names = sorted(user.name for user in people.find({"age": {"$gt": 30}}))
        assert names == ["Carol", "Eve"]

    def test_find_all_is_restartable(self, people):
        everyone = people.find_all()
        assert len(list(everyone)) == 5
        assert len(everyone.to_list()) == 5

    def test_find_all_as_dict(self, people):
        assert all(isinstance(document, dict) for document in people.find_all_as(dict))

    def test_find_all_other_collection(self, people):
        people.save_as(Widget(id="w1", label="gear"))
        assert [widget["label"] for widget in people.find_all_as(dict, "Widgets")] == ["gear"]

    def test_find_from_string_shell_syntax(self, people):
        found = people.find_from_string("{ age: { $lt: 26 } }").to_list()
        assert sorted(user.name for user in found) == ["Bob", "Dave"]

    def test_find_from_string_json_syntax(self, people):
        found = people.find_from_string('{"name": "Eve"}').first()
        assert found.id == "u4"

    def test_find_from_string_skip_and_limit(self, people):
        page = people.find_from_string("{}", skip=1, limit=2).to_list()
        assert [user.id for user in page] == ["u1", "u2"]

    def test_negative_skip_and_limit_mean_unbounded(self, people):
        assert len(people.find_from_string("{}", skip=-1, limit=-1).to_list()) == 5

    def test_find_from_string_as(self, people):
        found = people.find_from_string_as(dict, "{ name: 'Alice' }").to_list()
        assert found == [{"_id": "u0", "name": "Alice", "age": 30}]

    def test_find_one_from_string(self, people):
        assert people.find_one_from_string("{ name: 'Alice' }").id == "u0"

    def test_find_one_from_string_as(self, people):
        assert people.find_one_from_string_as(dict, "{ _id: 'u3' }")["name"] == "Dave"

    def test_find_one_from_string_json(self, people):
        assert json.loads(people.find_one_from_string_json("{ _id: 'u3' }")) == {"_id": "u3", "name": "Dave", "age": 19}

    def test_find_one_from_string_json_no_match(self, people):
        assert people.find_one_from_string_json("{ _id: 'zz' }") is None

    def test_find_from_string_json(self, people):
        documents = json.loads(people.find_from_string_json("{ age: { $gte: 35 } }"))
        assert sorted(document["_id"] for document in documents) == ["u2", "u4"]

    def test_find_from_string_json_paged(self, people):
        documents = json.loads(people.find_from_string_json("{}", skip=3, limit=10))
        assert [document["_id"] for document in documents] == ["u3", "u4"]

    def test_find_from_string_json_object_ids_are_strict(self, users):
        object_id = ObjectId()
        users.collection.insert_one({"_id": object_id, "name": "Oid"})
        documents = json.loads(users.find_from_string_json("{ name: 'Oid' }"))
        assert documents == [{"_id": {"$oid": str(object_id)}, "name": "Oid"}]

    def test_find_from_object_mapping(self, people):
        assert [user.id for user in people.find_from_object({"name": "Bob"})] == ["u1"]

    def test_find_from_object_model(self, people):
        class NameQuery(BaseModel):
            name: str | None = None
            age: int | None = None

        assert [user.id for user in people.find_from_object(NameQuery(name="Eve"))] == ["u4"]

    def test_find_from_object_as(self, people):
        assert people.find_from_object_as(dict, {"age": 19}).first()["name"] == "Dave"

    @pytest.mark.parametrize("query_object", ["{ name: 'Bob' }", None, 42])
    def test_find_from_object_rejects_non_objects(self, people, query_object):
        with pytest.raises(TypeError):
            people.find_from_object(query_object)

    def test_get_query_from_string(self, users):
        assert users.get_query_from_string("{ age: { $gt: 18 } }") == {"age": {"$gt": 18}}


class TestMalformedQueries:
    @pytest.mark.parametrize(
        "finder",
        [
            lambda repository, text: repository.find_from_string(text),
            lambda repository, text: repository.find_one_from_string(text),
            lambda repository, text: repository.find_one_from_string_json(text),
            lambda repository, text: repository.find_from_string_json(text),
            lambda repository, text: repository.find_one(text),
        ],
    )
    def test_malformed_filter_raises_and_records(self, users, finder):
        with pytest.raises(ParseError):
            finder(users, "{ name: ")
        assert users.last_error_message.startswith("Malformed query string")

    def test_empty_filter_string_raises(self, users):
        with pytest.raises(ParseError, match="empty"):
            users.find_from_string("")

    def test_non_document_filter_raises(self, users):
        with pytest.raises(ParseError, match="must describe a document"):
            users.find_from_string("[1, 2]")

    def test_get_query_from_string_does_not_record(self, users):
        with pytest.raises(ParseError):
            users.get_query_from_string("{ name: ")
        assert users.last_error_message == ""

    def test_unsupported_query_type(self, users):
        with pytest.raises(TypeError):
            users.find_one(42)

    def test_shell_object_id_matches_stored_object_id(self, users):
        saved = users.save_from_json('{"name": "Raw"}')
        found = users.find_one_as(dict, '{ _id: ObjectId("%s") }' % saved.id)
        assert found == {"_id": ObjectId(saved.id), "name": "Raw"}
        assert users.last_error_message == ""

    def test_unknown_shell_constructor_raises_and_records(self, users):
        with pytest.raises(ParseError):
            users.find_from_string("{ _id: UUID('0e0f') }")
        assert users.last_error_message.startswith("Unsupported constructor")

    def test_brace_less_filter_raises(self, users):
        with pytest.raises(ParseError, match="must describe a document"):
            users.find_one_from_string("name: Alice")


class TestTryVariants:
    def test_try_load_miss(self, users):
        result = users.try_load("missing")
        assert not result.ok
        assert result.value is None
        assert isinstance(result.error, DocumentNotFoundError)
        assert users.last_error_message == ""

    def test_try_load_hit(self, users):
        users.save(User(id="u1", name="Alice"))
        assert users.try_load("u1").unwrap().name == "Alice"

    def test_try_find_one(self, users):
        users.save(User(id="u1", name="Alice"))
        assert users.try_find_one({"name": "Alice"}).value.id == "u1"
        assert users.try_find_one({"name": "Zed"}).ok

    def test_try_find_one_from_string_parse_failure(self, users):
        result = users.try_find_one_from_string("{ name: ")
        assert isinstance(result.error, ParseError)
        assert users.last_error_message == ""

    def test_try_save_cancelled(self, context):
        class ReadOnlyUsers(DocumentRepository[User]):
            def on_before_save(self, entity):
                return False

        with ReadOnlyUsers(User, context=context) as repository:
            result = repository.try_save(User(id="u1", name="Alice"))
            assert result.value is False
            assert not result.ok
            assert repository.last_error_message == ""

    def test_try_save_as_none(self, users):
        result = users.try_save_as(None)
        assert result.value is False
        assert str(result.error) == "No entity to save passed."

    def test_try_save_from_json(self, users):
        assert users.try_save_from_json('{"_id": "j1"}').unwrap().id == "j1"

    def test_try_delete_invalid(self, users):
        result = users.try_delete(1.5)
        assert result.value is False
        with pytest.raises(EntityValidationError):
            result.unwrap()
        assert users.last_error_message == ""


class TestErrorState:
    def test_set_error_message(self, users):
        users.set_error("Something broke")
        assert users.last_error_message == "Something broke"
        assert str(users.error_exception) == "Something broke"
        assert str(users) == "Error: Something broke"

    def test_set_error_none_clears(self, users):
        users.set_error("Something broke")
        users.set_error()
        assert users.last_error_message == ""
        assert users.error_exception is None

    def test_set_error_empty_message_clears(self, users):
        users.set_error("Something broke")
        users.set_error("")
        assert not users.last_error

    def test_set_error_exception_check_inner(self, users):
        try:
            try:
                raise ConnectionError("refused")
            except ConnectionError as inner:
                raise RuntimeError("outer") from inner
        except RuntimeError as e:
            users.set_error(e, check_inner=True)
        assert users.last_error_message == "refused"
        assert isinstance(users.error_exception, ConnectionError)

    def test_set_error_exception_without_check_inner(self, users):
        users.set_error(RuntimeError("outer"))
        assert users.last_error_message == "outer"

    def test_clear_error(self, users):
        users.load("missing")
        users.clear_error()
        assert users.last_error_message == ""

    def test_str_without_error(self, users):
        assert str(users) == f"DocumentRepository({users.database.name}.Users)"

    def test_set_error_is_logged(self, users, caplog):
        with caplog.at_level("WARNING", logger="docrepo"):
            users.set_error("Something broke")
        assert "Something broke" in caplog.text


class TestGenerateId:
    def test_ids_are_distinct_object_id_strings(self, users):
        first, second = users.generate_id(), DocumentRepository.generate_id()
        assert first != second
        assert ObjectId.is_valid(first)
        assert ObjectId.is_valid(second)


class Memo(BaseModel):
    id: str
    text: str = ""


class TestModelIds:
    def test_plain_model_id_is_stored_as_underscore_id(self, context):
        with DocumentRepository(Memo, context=context) as memos:
            assert memos.save(Memo(id="m1", text="first")) is True
            assert memos.save(Memo(id="m1", text="second")) is True
            assert list(memos.collection.find()) == [{"_id": "m1", "text": "second"}]
            assert memos.load("m1") == Memo(id="m1", text="second")
            assert memos.find_all().to_list() == [Memo(id="m1", text="second")]

    def test_plain_model_delete_removes_document(self, context):
        with DocumentRepository(Memo, context=context) as memos:
            memo = Memo(id="m1")
            memos.save(memo)
            assert memos.delete(memo) is True
            assert memos.collection.count_documents({}) == 0

    def test_plain_model_save_as(self, context):
        with DocumentRepository(Memo, context=context) as memos:
            assert memos.save_as(Memo(id="m2", text="raw")) is True
            assert memos.collection.find_one({"_id": "m2"}) == {"_id": "m2", "text": "raw"}

    def test_integer_ids_load(self, users):
        users.save_as({"_id": 7, "name": "Int"}, "Users")
        assert users.load(7) == User(id=7, name="Int")
        assert users.delete(User(id=7, name="Int")) is True
        assert users.collection.count_documents({}) == 0

    def test_document_that_does_not_fit_is_recorded(self, users):
        users.save_as({"_id": "bad", "age": "old"}, "Users")
        assert users.load("bad") is None
        assert isinstance(users.error_exception, EntityValidationError)
        assert users.last_error_message.startswith("Cannot load document as User")
        assert users.find_one({"_id": "bad"}) is None

    def test_try_load_reports_documents_that_do_not_fit(self, users):
        users.save_as({"_id": "bad", "age": "old"}, "Users")
        result = users.try_load("bad")
        assert isinstance(result.error, EntityValidationError)
        assert users.last_error_message == ""

    def test_sequences_raise_for_documents_that_do_not_fit(self, users):
        users.save_as({"_id": "bad", "age": "old"}, "Users")
        with pytest.raises(EntityValidationError):
            users.find_all().to_list()
