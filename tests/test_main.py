from database import create_database, load_store, save_store
import main as cli
from main import main
from models import GraphStore, PersonNode, Sex


DESCRIPTION = """
# John and his parents
John M CHILD Gabe M
John M CHILD Izy F
John TO Izy
"""


def test_main_runs_pipeline(tmp_path, capsys):
    description = tmp_path / "family.kin"
    description.write_text(DESCRIPTION)
    db = tmp_path / "family.db"
    plot = tmp_path / "family.png"
    dot = tmp_path / "family.dot"

    code = main(
        [str(description), "--db", str(db), "--plot", str(plot), "--dot", str(dot), "--name", "2=Isabel"]
    )

    assert code == 0
    out = capsys.readouterr().out
    assert "Query: mother" in out
    assert "Placed 3 people with 2 edges" in out
    assert "1 relations between placed people are not drawn" in out
    assert plot.exists()
    assert dot.exists()

    conn = create_database(db)
    store = load_store(conn)
    conn.close()
    assert [n.name for n in store] == ["John", "Gabe", "Isabel"]


def test_main_keeps_saved_names(tmp_path):
    description = tmp_path / "family.kin"
    description.write_text(DESCRIPTION)
    db = tmp_path / "family.db"

    assert main([str(description), "--db", str(db), "--name", "1=Gabriel"]) == 0
    assert main([str(description), "--db", str(db)]) == 0

    conn = create_database(db)
    assert [n.name for n in load_store(conn)] == ["John", "Gabriel", "Izy"]
    conn.close()


def test_main_reports_bad_description(tmp_path, capsys):
    description = tmp_path / "family.kin"
    description.write_text("John M COUSIN Gabe M\n")

    assert main([str(description)]) == 1
    assert "invalid relationship" in capsys.readouterr().err


def test_main_reports_missing_root(tmp_path, capsys):
    description = tmp_path / "family.kin"
    description.write_text(DESCRIPTION)

    assert main([str(description), "--root", "7"]) == 1
    assert "Person ID 7 not found" in capsys.readouterr().err


def test_unreachable_count_ignores_dangling_relation_targets(tmp_path, capsys):
    # Ids 0 and 5 in the saved store: after the positional merge John's sibling
    # relation points at id 1, which is not in the store, and Izy (id 5) is unreachable
    db = tmp_path / "family.db"
    conn = create_database(db)
    save_store(conn, GraphStore(nodes=[PersonNode(0, Sex.MALE, "John"), PersonNode(5, Sex.FEMALE, "Izy")]))
    conn.close()
    description = tmp_path / "family.kin"
    description.write_text("John M SIBLING Izy F\n")

    assert main([str(description), "--db", str(db)]) == 0

    out = capsys.readouterr().out
    assert "Placed 1 people with 0 edges" in out
    assert "  1 people are not reachable from the root" in out


class RecordingConnection:
    def __init__(self, conn):
        self._conn = conn
        self.closed = False

    def __getattr__(self, name):
        return getattr(self._conn, name)

    def close(self):
        self.closed = True
        self._conn.close()


def test_database_is_closed_when_pipeline_fails(tmp_path, monkeypatch):
    opened = []

    def open_database(path):
        conn = RecordingConnection(create_database(path))
        opened.append(conn)
        return conn

    monkeypatch.setattr(cli, "create_database", open_database)
    description = tmp_path / "family.kin"
    description.write_text(DESCRIPTION)

    assert main([str(description), "--db", str(tmp_path / "family.db"), "--root", "7"]) == 1

    assert len(opened) == 1
    assert opened[0].closed
