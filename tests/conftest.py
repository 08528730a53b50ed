from pathlib import Path

import pytest


def write_table(path: Path, header, rows) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = ["|".join(header)]
    lines.extend("|".join(str(value) for value in row) for row in rows)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def write_csv():
    return write_table


@pytest.fixture
def dataset(tmp_path):
    """A small dataset split over static/ and dynamic/.

    Vertices: City x2, Country x1, University x1, Company x1, Person x3,
    Comment x2. Edges: 2 IS_PART_OF, 2 KNOWS, 2 IS_LOCATED_IN, 1 WORK_AT.
    """
    root = tmp_path / "dataset"
    static = root / "static"
    dynamic = root / "dynamic"

    write_table(
        static / "place_0.csv",
        ["id:ID(Place)", "name:STRING", ":LABEL"],
        [[1, "Paris", "City"], [2, "Lyon", "City"], [3, "France", "Country"]],
    )
    write_table(
        static / "organisation_0.csv",
        ["id:ID(Organisation)", ":LABEL", "name:STRING"],
        [[10, "University", "MIT"], [11, "Company", "ACME"]],
    )
    write_table(
        static / "place_isPartOf_place.csv",
        [":START_ID(Place)", ":END_ID(Place)"],
        [[1, 3], [2, 3]],
    )
    write_table(
        dynamic / "person_0.csv",
        ["id:ID(Person)", "firstName:STRING"],
        [[100, "Ada"], [101, "Alan"], [102, "Grace"]],
    )
    write_table(
        dynamic / "comment_0.csv",
        ["id:ID(Comment)", "content:STRING"],
        [[200, "hello"], [201, "world"]],
    )
    write_table(
        dynamic / "person_knows_person.csv",
        [":START_ID(Person)", ":END_ID(Person)", "creationDate:LONG"],
        [[100, 101, 1], [101, 102, 2]],
    )
    write_table(
        dynamic / "comment_isLocatedIn_place.csv",
        [":START_ID(Comment)", ":END_ID(Place)"],
        [[200, 1], [201, 3]],
    )
    write_table(
        dynamic / "person_workAt_organisation.csv",
        [":START_ID(Person)", ":END_ID(Organisation)", "workFrom:INT"],
        [[100, 11, 2010]],
    )
    return root
