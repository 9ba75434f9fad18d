"""
Tests pour la configuration de la base et le modele DocumentModel.
"""

from sqlmodel import Session, select

from catalog_admin.infrastructure.persistence.database import create_db_engine, init_db
from catalog_admin.infrastructure.persistence.models import DocumentModel


class TestDocumentModel:
    """Tests pour DocumentModel."""

    def test_data_property_decodes_json(self):
        model = DocumentModel(
            collection="movies",
            id="abc",
            data_json='{"title": "Nocturne", "categories": ["Thriller"]}',
        )
        assert model.data == {"title": "Nocturne", "categories": ["Thriller"]}

    def test_defaults(self):
        model = DocumentModel(collection="movies", id="abc")
        assert model.data == {}
        assert model.version == 1
        assert model.created_at is not None


class TestEngine:
    """Tests pour create_db_engine et init_db."""

    def test_file_database_creates_parent_directory(self, tmp_path):
        db_file = tmp_path / "nested" / "dir" / "catalog.db"
        engine = create_db_engine(f"sqlite:///{db_file}")
        init_db(engine)
        assert db_file.parent.exists()
        engine.dispose()

    def test_memory_database_shares_tables_across_sessions(self):
        """Une base en memoire garde ses tables d'une session a l'autre."""
        engine = create_db_engine("sqlite://")
        init_db(engine)

        with Session(engine) as session:
            session.add(DocumentModel(collection="users", id="u1"))
            session.commit()

        with Session(engine) as session:
            rows = session.exec(select(DocumentModel)).all()

        assert [row.id for row in rows] == ["u1"]
        engine.dispose()
