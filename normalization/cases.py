"""
normalization/cases.py
----------------------
The three denormalized designs of the discography exam, with their
business rules, declared dependencies, denormalized sample rows and the
proposed replacement tables.

Attribute names follow the original table designs (Spanish); the
physical PostgreSQL tables in db/init_db.py use English snake_case.
"""

from dataclasses import dataclass, field

from models.relation import (
    Attribute,
    FunctionalDependency as FD,
    MultivaluedDependency as MVD,
    RelationSchema,
    attr_set,
)


@dataclass
class WorkedCase:
    """
    One exam point.

    Attributes:
        key: Short identifier used by commands ('1', '2', '3').
        title: Human-readable title.
        schema: The denormalized relation with its dependencies.
        business_rules: Rules the dependencies were derived from.
        target: Normal form the exercise normalizes to.
        sample_rows: Rows of the denormalized table, in attribute order.
        proposed: The replacement tables of the worked answer.
        names: Table names for engine-produced fragments, keyed by attribute set.
        tables: Physical tables (db/init_db.py) implementing the answer.
        claimed_violation: Normal form the exercise itself says is violated.
        claim: The exercise's own justification for that verdict.
    """
    key: str
    title: str
    schema: RelationSchema
    business_rules: list[str]
    target: str
    sample_rows: list[tuple]
    proposed: list[RelationSchema] = field(default_factory=list)
    names: dict[frozenset[str], str] = field(default_factory=dict)
    tables: list[str] = field(default_factory=list)
    claimed_violation: str | None = None
    claim: str = ""


# ── PUNTO 1: ArtistaCancion ───────────────────────────────

_ARTISTA_CANCION = RelationSchema(
    name="ArtistaCancion",
    attributes=[
        Attribute("IdInterprete"),
        Attribute("NombreInterprete", "NVARCHAR(50)"),
        Attribute("IdPais"),
        Attribute("Pais", "NVARCHAR(50)"),
        Attribute("IdCancion"),
        Attribute("TituloCancion", "NVARCHAR(50)"),
        Attribute("Idiomas", "NVARCHAR(MAX)", atomic=False, element="Idioma"),
        Attribute("Ritmo", "NVARCHAR(50)"),
    ],
    primary_key=attr_set(["IdInterprete", "IdCancion"]),
    fds=[
        FD.of("IdInterprete", ["NombreInterprete", "IdPais"]),
        FD.of("IdPais", "Pais"),
        FD.of("IdCancion", ["TituloCancion", "Ritmo", "Idiomas"]),
    ],
    description="Relación entre un intérprete y una canción, con país e idiomas",
)

_CASE_1 = WorkedCase(
    key="1",
    title="ArtistaCancion: normalización hasta 3FN",
    schema=_ARTISTA_CANCION,
    business_rules=[
        "Cada intérprete tiene un nombre y pertenece a un país",
        "Cada país tiene un único nombre",
        "Cada canción tiene un título, un ritmo y se canta en uno o más idiomas",
        "Un intérprete puede interpretar varias canciones y una canción varios intérpretes",
    ],
    target="3NF",
    sample_rows=[
        (1, "Shakira", 1, "Colombia", 1, "La Tortura", "Español, Inglés", "Reggaeton"),
        (1, "Shakira", 1, "Colombia", 2, "Hips Dont Lie", "Inglés", "Pop"),
    ],
    proposed=[
        RelationSchema(
            name="Pais",
            attributes=[Attribute("IdPais"), Attribute("NombrePais", "NVARCHAR(50)")],
            primary_key=attr_set("IdPais"),
            fds=[FD.of("IdPais", "NombrePais")],
            description="Elimina la dependencia transitiva: cada país se guarda una vez",
        ),
        RelationSchema(
            name="Interprete",
            attributes=[
                Attribute("IdInterprete"),
                Attribute("NombreInterprete", "NVARCHAR(50)"),
                Attribute("IdPais"),
            ],
            primary_key=attr_set("IdInterprete"),
            fds=[FD.of("IdInterprete", ["NombreInterprete", "IdPais"])],
            description="Elimina dependencias parciales: datos del intérprete una sola vez",
        ),
        RelationSchema(
            name="Cancion",
            attributes=[
                Attribute("IdCancion"),
                Attribute("TituloCancion", "NVARCHAR(50)"),
                Attribute("Ritmo", "NVARCHAR(50)"),
            ],
            primary_key=attr_set("IdCancion"),
            fds=[FD.of("IdCancion", ["TituloCancion", "Ritmo"])],
            description="Elimina dependencias parciales: datos de la canción una sola vez",
        ),
        RelationSchema(
            name="Idioma",
            attributes=[Attribute("IdIdioma"), Attribute("NombreIdioma", "NVARCHAR(50)")],
            primary_key=attr_set("IdIdioma"),
            fds=[FD.of("IdIdioma", "NombreIdioma"), FD.of("NombreIdioma", "IdIdioma")],
            description="Cada idioma es una entidad independiente (nombre único)",
        ),
        RelationSchema(
            name="CancionIdioma",
            attributes=[Attribute("IdCancion"), Attribute("IdIdioma")],
            primary_key=attr_set(["IdCancion", "IdIdioma"]),
            description="Resuelve 1FN: un registro atómico por combinación canción-idioma",
        ),
        RelationSchema(
            name="InterpreteCancion",
            attributes=[
                Attribute("IdInterprete"),
                Attribute("IdCancion"),
                Attribute("FechaGrabacion", "DATE"),
            ],
            primary_key=attr_set(["IdInterprete", "IdCancion"]),
            fds=[FD.of(["IdInterprete", "IdCancion"], "FechaGrabacion")],
            description="La relación original intérprete-canción sin redundancia",
        ),
    ],
    names={
        attr_set(["IdPais", "Pais"]): "Pais",
        attr_set(["IdInterprete", "NombreInterprete", "IdPais"]): "Interprete",
        attr_set(["IdCancion", "TituloCancion", "Ritmo"]): "Cancion",
        attr_set(["IdCancion", "Idioma"]): "CancionIdioma",
        attr_set(["IdInterprete", "IdCancion"]): "InterpreteCancion",
    },
    tables=["countries", "performers", "songs", "languages", "song_languages", "performer_songs"],
)


# ── PUNTO 2: Grabacion ────────────────────────────────────

_GRABACION = RelationSchema(
    name="Grabacion",
    attributes=[
        Attribute("IdInterpretacion", identity=True),
        Attribute("IdAlbum"),
        Attribute("IdFormato"),
    ],
    primary_key=attr_set(["IdInterpretacion", "IdAlbum", "IdFormato"]),
    fds=[FD.of(["IdAlbum", "IdInterpretacion"], "IdFormato")],
    description="Grabaciones de interpretaciones en álbumes y formatos",
)

_CASE_2 = WorkedCase(
    key="2",
    title="Grabacion: análisis BCNF",
    schema=_GRABACION,
    business_rules=[
        "Una interpretación puede estar grabada en varios álbumes y en varios formatos",
        "En un mismo álbum, una interpretación solo debe existir una vez por formato",
    ],
    target="BCNF",
    sample_rows=[
        (1, 1, 1),
        (1, 1, 3),
        (2, 2, 1),
        (2, 2, 2),
    ],
    proposed=[
        RelationSchema(
            name="Interpretacion",
            attributes=[
                Attribute("IdInterpretacion", identity=True),
                Attribute("TituloInterpretacion", "NVARCHAR(100)"),
                Attribute("Duracion", "TIME"),
            ],
            primary_key=attr_set("IdInterpretacion"),
            fds=[FD.of("IdInterpretacion", ["TituloInterpretacion", "Duracion"])],
        ),
        RelationSchema(
            name="Album",
            attributes=[
                Attribute("IdAlbum"),
                Attribute("TituloAlbum", "NVARCHAR(100)"),
                Attribute("AnioLanzamiento"),
            ],
            primary_key=attr_set("IdAlbum"),
            fds=[FD.of("IdAlbum", ["TituloAlbum", "AnioLanzamiento"])],
        ),
        RelationSchema(
            name="Formato",
            attributes=[
                Attribute("IdFormato"),
                Attribute("NombreFormato", "NVARCHAR(50)"),
                Attribute("Descripcion", "NVARCHAR(200)"),
            ],
            primary_key=attr_set("IdFormato"),
            fds=[FD.of("IdFormato", ["NombreFormato", "Descripcion"])],
        ),
        RelationSchema(
            name="Grabacion",
            attributes=[
                Attribute("IdGrabacion", identity=True),
                Attribute("IdInterpretacion"),
                Attribute("IdAlbum"),
                Attribute("IdFormato"),
                Attribute("FechaGrabacion", "DATE"),
            ],
            primary_key=attr_set("IdGrabacion"),
            fds=[
                FD.of("IdGrabacion", ["IdInterpretacion", "IdAlbum", "IdFormato", "FechaGrabacion"]),
                FD.of(["IdAlbum", "IdInterpretacion", "IdFormato"], ["IdGrabacion", "FechaGrabacion"]),
            ],
            description="Clave simple; UNIQUE (IdAlbum, IdInterpretacion, IdFormato) garantiza la regla",
        ),
    ],
    names={attr_set(["IdInterpretacion", "IdAlbum", "IdFormato"]): "Grabacion"},
    tables=["performances", "albums", "formats", "recordings"],
    claimed_violation="BCNF",
    claim=(
        "(IdAlbum, IdInterpretacion) → IdFormato y el determinante no es "
        "superclave de la clave declarada (IdInterpretacion, IdAlbum, IdFormato)"
    ),
)


# ── PUNTO 3: CampanaPromocion ─────────────────────────────

_CAMPANA = RelationSchema(
    name="CampanaPromocion",
    attributes=[
        Attribute("IdCancion"),
        Attribute("IdInterprete"),
        Attribute("Plataforma", "NVARCHAR(50)"),
        Attribute("Pais", "NVARCHAR(50)"),
    ],
    primary_key=attr_set(["IdCancion", "IdInterprete", "Plataforma", "Pais"]),
    mvds=[
        MVD.of(["IdCancion", "IdInterprete"], "Plataforma"),
        MVD.of(["IdCancion", "IdInterprete"], "Pais"),
    ],
    description="Promoción de una canción de un intérprete en plataformas y países",
)

_PLATFORMS = ["Spotify", "YouTube", "Apple Music"]
_COUNTRIES = ["Colombia", "México", "España", "Argentina"]

_CASE_3 = WorkedCase(
    key="3",
    title="CampanaPromocion: análisis 4FN y 5FN",
    schema=_CAMPANA,
    business_rules=[
        "Una canción de un intérprete se promueve en varias plataformas",
        "Una canción de un intérprete se promueve en varios países",
        "Plataformas y países se eligen de forma INDEPENDIENTE",
    ],
    target="5NF",
    sample_rows=[(1, 1, platform, country) for platform in _PLATFORMS for country in _COUNTRIES],
    proposed=[
        RelationSchema(
            name="PromocionPlataforma",
            attributes=[
                Attribute("IdPromocionPlataforma", identity=True),
                Attribute("IdCancion"),
                Attribute("IdInterprete"),
                Attribute("Plataforma", "NVARCHAR(50)"),
                Attribute("FechaInicio", "DATE"),
                Attribute("FechaFin", "DATE"),
            ],
            primary_key=attr_set("IdPromocionPlataforma"),
            fds=[
                FD.of("IdPromocionPlataforma", ["IdCancion", "IdInterprete", "Plataforma", "FechaInicio", "FechaFin"]),
                FD.of(["IdCancion", "IdInterprete", "Plataforma"], ["IdPromocionPlataforma", "FechaInicio", "FechaFin"]),
            ],
            description="Maneja solo la dependencia →→ Plataforma",
        ),
        RelationSchema(
            name="PromocionPais",
            attributes=[
                Attribute("IdPromocionPais", identity=True),
                Attribute("IdCancion"),
                Attribute("IdInterprete"),
                Attribute("Pais", "NVARCHAR(50)"),
                Attribute("FechaInicio", "DATE"),
                Attribute("FechaFin", "DATE"),
            ],
            primary_key=attr_set("IdPromocionPais"),
            fds=[
                FD.of("IdPromocionPais", ["IdCancion", "IdInterprete", "Pais", "FechaInicio", "FechaFin"]),
                FD.of(["IdCancion", "IdInterprete", "Pais"], ["IdPromocionPais", "FechaInicio", "FechaFin"]),
            ],
            description="Maneja solo la dependencia →→ Pais",
        ),
    ],
    names={
        attr_set(["IdCancion", "IdInterprete", "Plataforma"]): "PromocionPlataforma",
        attr_set(["IdCancion", "IdInterprete", "Pais"]): "PromocionPais",
    },
    tables=["platform_promotions", "country_promotions"],
)


_CASES: dict[str, WorkedCase] = {c.key: c for c in (_CASE_1, _CASE_2, _CASE_3)}


def list_cases() -> list[WorkedCase]:
    """All worked cases in exam order."""
    return list(_CASES.values())


def get_case(key: str) -> WorkedCase:
    """
    Look up a worked case by its key.

    Raises:
        KeyError: If no case has that key.
    """
    try:
        return _CASES[str(key).strip()]
    except KeyError:
        raise KeyError(f"Unknown case '{key}', expected one of {sorted(_CASES)}") from None
