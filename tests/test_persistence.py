import json
import threading

import pytest

from promptcraftr.agent.wizard import ASSISTANT, PromptWizard
from promptcraftr.prompts.steps import INTRO_MSG, empty_draft
from promptcraftr.utils import storage
from promptcraftr.utils.storage import DRAFT_KEY, MESSAGES_KEY, STEP_KEY, JsonFileStore, MemoryStore


class BrokenStore(MemoryStore):
    def get(self, key):
        raise OSError("unavailable")

    def set(self, key, value):
        raise OSError("quota exceeded")

    def clear(self):
        raise OSError("unavailable")


def test_session_survives_reload(store):
    wizard = PromptWizard(store).load()
    wizard.send("idea")
    wizard.send("Analyst")

    restored = PromptWizard(store).load()
    assert restored.draft == wizard.draft
    assert restored.step_index == 2
    assert restored.messages == wizard.messages


def test_draft_round_trip_is_identical(store):
    wizard = PromptWizard(store).load()
    wizard.draft.update({"Role": "Analyst", "Examples": "line 1\nline \"2\" ✓"})
    wizard.save()
    assert json.loads(store.get(DRAFT_KEY)) == wizard.draft
    assert PromptWizard(store).load().draft == wizard.draft


def test_missing_slots_fall_back_to_defaults(store):
    wizard = PromptWizard(store).load()
    assert wizard.draft == empty_draft()
    assert wizard.step_index == 0
    assert [(m.role, m.text) for m in wizard.messages] == [(ASSISTANT, INTRO_MSG)]


def test_corrupt_slot_only_resets_that_slot(store):
    wizard = PromptWizard(store).load()
    wizard.send("idea")
    store.set(DRAFT_KEY, "{not json")

    restored = PromptWizard(store).load()
    assert restored.draft == empty_draft()
    assert restored.step_index == 1
    assert len(restored.messages) == len(wizard.messages)


def test_stored_step_is_clamped(store):
    store.set(STEP_KEY, "42")
    assert PromptWizard(store).load().step_index == 10
    store.set(STEP_KEY, "-3")
    assert PromptWizard(store).load().step_index == 0
    store.set(STEP_KEY, '"4"')
    assert PromptWizard(store).load().step_index == 0


def test_unknown_draft_keys_are_dropped(store):
    store.set(DRAFT_KEY, json.dumps({"Role": "Coach", "Extra": "x", "Task": 5}))
    draft = PromptWizard(store).load().draft
    assert draft["Role"] == "Coach"
    assert draft["Task"] == ""
    assert "Extra" not in draft


def test_malformed_messages_fall_back_to_intro(store):
    store.set(MESSAGES_KEY, json.dumps([{"role": "bot", "text": "hi", "ts": 1}]))
    messages = PromptWizard(store).load().messages
    assert [m.text for m in messages] == [INTRO_MSG]


def test_storage_failures_are_swallowed():
    wizard = PromptWizard(BrokenStore()).load()
    assert wizard.step_index == 0
    wizard.send("idea")
    assert wizard.draft["InitialIdea"] == "idea"
    assert wizard.step_index == 1
    wizard.wipe()
    assert wizard.draft == empty_draft()


def test_wipe_clears_store_and_restarts(store):
    wizard = PromptWizard(store).load()
    wizard.send("idea")
    store.set("unrelated", "1")
    wizard.wipe()
    assert store.get("unrelated") is None
    assert wizard.step_index == 0
    assert PromptWizard(store).load().draft == empty_draft()


def test_json_file_store_round_trip(tmp_path):
    path = tmp_path / "nested" / "default.json"
    store = JsonFileStore(path)
    assert store.get("k") is None
    store.set("k", "v")
    store.set("other", '{"a": 1}')
    assert JsonFileStore(path).get("k") == "v"
    assert JsonFileStore(path).get("other") == '{"a": 1}'
    store.clear()
    assert not path.exists()
    store.clear()


def test_json_file_store_tolerates_corrupt_file(tmp_path):
    path = tmp_path / "default.json"
    path.write_text("[1, 2", encoding="utf-8")
    store = JsonFileStore(path)
    assert store.get("k") is None
    store.set("k", "v")
    assert store.get("k") == "v"


def test_wizard_persists_to_file(tmp_path):
    store = JsonFileStore(tmp_path / "s.json")
    PromptWizard(store).load().send("idea")
    assert PromptWizard(JsonFileStore(tmp_path / "s.json")).load().draft["InitialIdea"] == "idea"


def test_json_file_store_failed_write_keeps_previous_contents(tmp_path, monkeypatch):
    path = tmp_path / "default.json"
    store = JsonFileStore(path)
    store.set(DRAFT_KEY, '{"Role": "Analyst"}')
    store.set(STEP_KEY, "2")

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(storage.os, "replace", fail_replace)
    with pytest.raises(OSError):
        store.set(DRAFT_KEY, '{"Role": "Pirate"}')
    monkeypatch.undo()

    restored = JsonFileStore(path)
    assert restored.get(DRAFT_KEY) == '{"Role": "Analyst"}'
    assert restored.get(STEP_KEY) == "2"
    assert [p.name for p in tmp_path.iterdir()] == ["default.json"]


def test_wizard_state_survives_failed_save(tmp_path, monkeypatch):
    store = JsonFileStore(tmp_path / "s.json")
    wizard = PromptWizard(store).load()
    wizard.send("idea")

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(storage.os, "replace", fail_replace)
    wizard.send("Analyst")
    monkeypatch.undo()

    assert wizard.draft["Role"] == "Analyst"
    restored = PromptWizard(JsonFileStore(tmp_path / "s.json")).load()
    assert restored.draft["InitialIdea"] == "idea"
    assert restored.step_index == 1


def test_json_file_store_concurrent_sets_keep_every_key(tmp_path):
    store = JsonFileStore(tmp_path / "default.json")
    threads = [threading.Thread(target=store.set, args=(f"key{i}", str(i))) for i in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    restored = JsonFileStore(tmp_path / "default.json")
    assert all(restored.get(f"key{i}") == str(i) for i in range(20))
