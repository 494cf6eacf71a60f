"""Shared fixtures: a small seed directory about Macondo."""

import json
from pathlib import Path

import pytest

from book_question_analyzer.storage.seeds import load_seed_store

CHARACTERS = [
    {"id": "c1", "name": "José Arcadio Buendía", "generation": 1},
    {"id": "c2", "name": "Úrsula Iguarán", "generation": 1},
    {"id": "c3", "name": "Aureliano (el coronel)", "generation": 2},
    {"id": "c4", "name": "Melquíades"},
]

PLACES = [
    {"id": "p1", "name": "Macondo"},
    {"id": "p2", "name": "Riohacha"},
]

OBJECTS = [
    {"id": "o1", "name": "Pergaminos", "character": "c4"},
]

GENERATIONS = [
    {"id": "g1", "name": "Primera generación", "main_characters": ["c1", "c2"]},
]

EVENTS = [
    {
        "id": "e1",
        "name": "Fundación de Macondo",
        "description": "José Arcadio Buendía fundó el pueblo junto al río",
        "involved_characters": ["c1", "c2"],
        "related_place": "p1",
        "related_generation": "g1",
    },
    {
        "id": "e2",
        "name": "Muerte de Úrsula",
        "description": "Úrsula murió un jueves santo, ciega y centenaria",
        "involved_characters": ["c2"],
        "related_place": "p1",
    },
    {
        "id": "e3",
        "name": "Guerras del coronel",
        "description": "Aureliano promovió treinta y dos levantamientos armados",
        "involved_characters": ["c3"],
        "related_place": "p1",
    },
    {
        "id": "e4",
        "name": "Boda de Remedios",
        "description": "Se casaron en una ceremonia en la casa",
        "involved_characters": ["c3"],
        "related_place": "p2",
    },
    {
        "id": "e5",
        "name": "Llegada de los gitanos",
        "description": "Melquíades trajo el imán",
        "involved_characters": ["c4"],
        "related_place": "p1",
    },
]

CHAPTERS = [
    {"number": 3, "events": ["e1", "e2"]},
    {"number": 5, "events": ["e5"]},
]


def write_seeds(directory: Path, include_objects: bool = True) -> Path:
    """Write the test collections as seed files."""
    directory.mkdir(parents=True, exist_ok=True)
    files = {
        "characters.json": CHARACTERS,
        "places.json": PLACES,
        "generations.json": GENERATIONS,
        "events.json": EVENTS,
        "chapters.json": CHAPTERS,
    }
    if include_objects:
        files["objects.json"] = OBJECTS

    for filename, data in files.items():
        with open(directory / filename, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
    return directory


@pytest.fixture
def seed_dir(tmp_path):
    return write_seeds(tmp_path / "seeds")


@pytest.fixture
def store(seed_dir):
    return load_seed_store(seed_dir)


@pytest.fixture
def seed_writer():
    return write_seeds
