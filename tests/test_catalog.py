from __future__ import annotations

import threading

import pytest

from notequiz_backend.domain.catalog import (
    GUESS_COUNT,
    LockedRandom,
    NoteCatalog,
    NoteIndexOutOfRange,
    audio_path_for,
    check_answer,
)


def test_middle_c_scenario(catalog):
    assert catalog.name_at(24) == "C4"
    assert catalog.position_at(24) == 15
    assert catalog.next_name(24) == "Db4"
    assert catalog.previous_name(24) == "B3"


def test_edge_sentinels(catalog):
    assert catalog.previous_name(0) == "B1"
    assert catalog.next_name(48) == "Db6"
    assert catalog.next_name(47) == "C6"
    assert catalog.previous_name(1) == "C2"


def test_lookups_stable_for_all_indices(catalog):
    first = [(catalog.name_at(i), catalog.position_at(i)) for i in range(catalog.size)]
    second = [(catalog.name_at(i), catalog.position_at(i)) for i in range(catalog.size)]
    assert first == second
    assert catalog.size == 49


@pytest.mark.parametrize("idx", [-1, 49, 1000])
def test_out_of_range_lookups(catalog, idx):
    for fn in (catalog.name_at, catalog.position_at, catalog.note_at, catalog.next_name, catalog.previous_name):
        with pytest.raises(NoteIndexOutOfRange) as ei:
            fn(idx)
        assert ei.value.index == idx
        assert ei.value.size == 49
    with pytest.raises(NoteIndexOutOfRange):
        catalog.distractor_set(idx)
    with pytest.raises(NoteIndexOutOfRange):
        catalog.check_position(idx, 1)


def test_out_of_range_is_lookup_error(catalog):
    with pytest.raises(LookupError):
        catalog.name_at(-1)


def test_check_answer_case_insensitive():
    assert check_answer("Db4", "db4")
    assert check_answer("Db4", "DB4")
    assert not check_answer("Db4", "D4")
    assert not check_answer("Db4", "C#4")
    assert not check_answer("Db4", " Db4")


def test_check_position(catalog):
    assert catalog.check_position(24, 15)
    assert not catalog.check_position(24, 14)


def test_quiz_note_shape(catalog):
    n = catalog.note_at(3)
    assert n.name == "Eb2"
    assert n.audio_path == "/audio/Eb2.mp3"
    assert n.to_dict() == {"idx": 3, "note": "Eb2", "audioPath": "/audio/Eb2.mp3", "position": 3}


def test_audio_prefix_is_configurable():
    assert audio_path_for("C4", prefix="/static/notes/") == "/static/notes/C4.mp3"
    cat = NoteCatalog(audio_url_prefix="/mp3")
    assert cat.note_at(24).audio_path == "/mp3/C4.mp3"


def test_random_note_uses_injected_source(scripted_random):
    cat = NoteCatalog(scripted_random([24, 0, 48]))
    assert [cat.random_note().name for _ in range(3)] == ["C4", "C2", "C6"]


def test_random_note_covers_full_range():
    cat = NoteCatalog(LockedRandom(seed=1234))
    seen = {cat.random_note().index for _ in range(5000)}
    assert seen == set(range(49))


def test_check_text_position_all_correct(catalog):
    r = catalog.check_text_position(24, provided_next="db4", provided_previous="B3", provided_position=15)
    assert r.next_correct and r.previous_correct and r.position_correct
    assert r.to_dict() == {"nextCorrect": True, "previousCorrect": True, "positionCorrect": True}


def test_check_text_position_reports_corrections(catalog):
    r = catalog.check_text_position(24, provided_next="D4", provided_previous="C3", provided_position=14)
    assert r.to_dict() == {
        "nextCorrect": False,
        "previousCorrect": False,
        "positionCorrect": False,
        "correctNext": "Db4",
        "correctPrevious": "B3",
        "correctPosition": 15,
    }


def test_check_text_position_at_edges(catalog):
    r = catalog.check_text_position(48, provided_next="Db6", provided_previous="b5", provided_position=29)
    assert r.to_dict() == {"nextCorrect": True, "previousCorrect": True, "positionCorrect": True}
    r = catalog.check_text_position(0, provided_next="Db2", provided_previous="C1", provided_position=1)
    assert r.correct_previous == "B1"
    assert r.correct_next is None


@pytest.mark.parametrize("idx", [0, 24, 48])
def test_distractor_set_contract(idx):
    cat = NoteCatalog(LockedRandom(seed=idx))
    for _ in range(50):
        notes, slot = cat.distractor_set(idx)
        assert len(notes) == GUESS_COUNT
        assert len({n.index for n in notes}) == GUESS_COUNT
        assert 0 <= slot < GUESS_COUNT
        assert notes[slot].index == idx
        assert notes[slot].name == cat.name_at(idx)


def test_distractor_set_deterministic_with_scripted_source(scripted_random):
    cat = NoteCatalog(scripted_random())
    notes, slot = cat.distractor_set(2)
    # 目标 2 + 其余前 5 个（0,1,3,4,5），反转后目标落在最后
    assert [n.index for n in notes] == [5, 4, 3, 1, 0, 2]
    assert slot == 5


def test_check_guess():
    assert NoteCatalog.check_guess(3, 3)
    assert not NoteCatalog.check_guess(3, 2)


def test_notes_listing(catalog):
    notes = catalog.notes()
    assert len(notes) == 49
    assert notes[24].name == "C4"


def test_locked_random_shared_across_threads():
    cat = NoteCatalog(LockedRandom(seed=7))
    errors: list[BaseException] = []

    def worker() -> None:
        try:
            for _ in range(200):
                notes, slot = cat.distractor_set(10)
                assert notes[slot].index == 10
        except BaseException as e:  # noqa: BLE001
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert not errors
