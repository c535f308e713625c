"""Tests for the local-store emulation of the REST API."""

import pytest

from bioalgos.client.errors import ConflictError, CorruptStoreError
from bioalgos.client.local import LocalStore, next_problem_id
from bioalgos.client.seed import SAMPLE_PROBLEMS
from bioalgos.client.storage import MemoryStore, StoreFacade


@pytest.fixture
def local(storage):
    return LocalStore(storage)


class TestSeeding:
    def test_empty_problems_seeded_on_first_list(self, local, storage):
        problems = local.list('problems')
        assert [p['id'] for p in problems] == [1, 2, 3]
        assert storage.read('problems') == problems

    def test_second_list_does_not_reseed(self, local, storage):
        first = local.list('problems')
        second = local.list('problems')
        assert first == second
        assert len(storage.read('problems')) == len(SAMPLE_PROBLEMS)

    def test_empty_array_is_seeded(self):
        storage = StoreFacade(MemoryStore({'problems': '[]'}))
        assert len(LocalStore(storage).list('problems')) == 3

    def test_existing_problems_not_replaced(self):
        storage = StoreFacade(MemoryStore({'problems': '[{"id": 7, "title": "Mine"}]'}))
        assert LocalStore(storage).list('problems') == [{'id': 7, 'title': 'Mine'}]

    def test_seed_is_a_copy(self, local):
        local.list('problems')[0]['title'] = 'changed'
        assert SAMPLE_PROBLEMS[0]['title'] == 'DNA Sequence Alignment'

    def test_other_collections_not_seeded(self, local):
        assert local.list('submissions') == []
        assert local.list('users') == []


class TestIdAssignment:
    def test_next_id_after_gap(self):
        storage = StoreFacade(MemoryStore({'problems': '[{"id": 1}, {"id": 3}]'}))
        created = LocalStore(storage).create('problems', {'title': 'New'})
        assert created['id'] == 4

    def test_first_id_is_one(self):
        local = LocalStore(StoreFacade(MemoryStore()), seed_problems=False)
        assert local.create('problems', {'title': 'First'})['id'] == 1

    def test_next_problem_id_skips_non_numeric(self):
        assert next_problem_id([{'id': 'abc'}, {'id': 2}, {}]) == 3
        assert next_problem_id([]) == 1

    def test_caller_supplied_id_kept(self, local):
        created = local.create('problems', {'id': 42, 'title': 'Fixed'})
        assert created['id'] == 42

    def test_duplicate_caller_supplied_id_rejected(self, local, storage):
        local.list('problems')
        with pytest.raises(ConflictError):
            local.create('problems', {'id': '2', 'title': 'Dup'})
        assert len(storage.read('problems')) == 3

    def test_other_collections_get_timestamp_ids(self, local):
        first = local.create('submissions', {'code': 'a'})
        second = local.create('submissions', {'code': 'b'})
        assert isinstance(first['id'], int)
        assert first['id'] > 1_600_000_000_000
        assert first['id'] != second['id']


class TestCrud:
    def test_create_then_get_roundtrip(self, local):
        created = local.create('problems', {'title': 'Motif Finding', 'slug': 'motif-finding'})
        assert local.get('problems', created['id']) == created

    def test_get_missing_returns_none(self, local):
        assert local.get('problems', 999) is None
        assert local.get('users', 'nobody') is None

    def test_get_by_slug(self, local):
        found = local.get_by_slug('problems', 'protein-folding-prediction')
        assert found['id'] == 2
        assert local.get_by_slug('problems', 'no-such-slug') is None

    def test_get_matches_string_key(self, local):
        assert local.get('problems', '3')['slug'] == 'gene-expression-clustering'

    def test_update_with_string_id_matches_numeric(self):
        storage = StoreFacade(MemoryStore({'problems': '[{"id": 5, "title": "Old"}]'}))
        local = LocalStore(storage)
        updated = local.update('problems', '5', {'title': 'New'})
        assert updated == {'title': 'New', 'id': 5}
        assert storage.read('problems') == [{'title': 'New', 'id': 5}]

    def test_update_is_full_replace(self, local):
        local.list('problems')
        local.update('problems', 1, {'title': 'Only title'})
        stored = local.get('problems', 1)
        assert stored == {'title': 'Only title', 'id': 1}

    def test_update_missing_returns_none(self, local, storage):
        local.list('problems')
        before = storage.read('problems')
        assert local.update('problems', 99, {'title': 'x'}) is None
        assert storage.read('problems') == before

    def test_delete_removes_record(self, local):
        local.list('problems')
        local.delete('problems', '2')
        assert [p['id'] for p in local.list('problems')] == [1, 3]

    def test_delete_missing_is_noop(self, local, storage):
        local.list('problems')
        before = storage.read('problems')
        local.delete('problems', 12345)
        assert storage.read('problems') == before

    def test_missing_submissions_key_lists_empty(self, local, storage):
        assert storage.read('submissions') is None
        assert local.list('submissions') == []

    def test_corrupt_collection_propagates(self):
        local = LocalStore(StoreFacade(MemoryStore({'submissions': 'oops'})))
        with pytest.raises(CorruptStoreError):
            local.list('submissions')
        with pytest.raises(CorruptStoreError):
            local.create('submissions', {'code': 'x'})
