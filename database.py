"""Relational geometry source (SQLAlchemy).

Schema (one row per building, corner and wall):

    Building(id, min_x, min_y, max_x, max_y)
    Corner(id, x, y)
    Wall(id, building_id, sequence_number, from_corner_id, to_corner_id)

Coordinates are stored in the map's own frame; the simulation offset is
applied by the consumers. Query failures are logged and answered with empty
results so a broken record never aborts a propagation query.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import Column, Float, ForeignKey, Integer, create_engine, inspect, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .sources import BuildingRecord, CornerRow

logger = logging.getLogger(__name__)

Base = declarative_base()


class BuildingModel(Base):
    __tablename__ = "Building"

    id = Column(Integer, primary_key=True)
    min_x = Column(Float, nullable=False)
    min_y = Column(Float, nullable=False)
    max_x = Column(Float, nullable=False)
    max_y = Column(Float, nullable=False)

    def __repr__(self):
        return f"<Building(id={self.id}, box=({self.min_x},{self.min_y})-({self.max_x},{self.max_y}))>"


class CornerModel(Base):
    __tablename__ = "Corner"

    id = Column(Integer, primary_key=True)
    x = Column(Float, nullable=False)
    y = Column(Float, nullable=False)


class WallModel(Base):
    __tablename__ = "Wall"

    id = Column(Integer, primary_key=True, autoincrement=True)
    building_id = Column(Integer, ForeignKey("Building.id"), nullable=False, index=True)
    sequence_number = Column(Integer, nullable=False)
    from_corner_id = Column(Integer, ForeignKey("Corner.id"), nullable=False)
    to_corner_id = Column(Integer, ForeignKey("Corner.id"), nullable=False)


def create_schema(engine) -> None:
    Base.metadata.create_all(engine)


class SqlGeometrySource:
    """GeometrySource over a SQLAlchemy session factory."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def buildings_in_circle(self, center_x: float, center_y: float, radius: float) -> List[BuildingRecord]:
        sqr_radius = radius * radius

        def corner_inside(x_col, y_col):
            return sqr_radius >= (x_col - center_x) * (x_col - center_x) + (y_col - center_y) * (y_col - center_y)

        try:
            with self._session_factory() as db:
                rows = (
                    db.query(BuildingModel)
                    .filter(or_(
                        corner_inside(BuildingModel.min_x, BuildingModel.min_y),
                        corner_inside(BuildingModel.min_x, BuildingModel.max_y),
                        corner_inside(BuildingModel.max_x, BuildingModel.min_y),
                        corner_inside(BuildingModel.max_x, BuildingModel.max_y),
                    ))
                    .order_by(BuildingModel.id)
                    .all()
                )
                return [BuildingRecord(r.id, r.min_x, r.min_y, r.max_x, r.max_y) for r in rows]
        except SQLAlchemyError as exc:
            logger.error("building query failed: %s", exc)
            return []

    def _corners(self, building_id: int, column) -> List[CornerRow]:
        try:
            with self._session_factory() as db:
                rows = (
                    db.query(WallModel.sequence_number, CornerModel.id, CornerModel.x, CornerModel.y)
                    .join(CornerModel, CornerModel.id == column)
                    .filter(WallModel.building_id == building_id)
                    .order_by(WallModel.sequence_number)
                    .all()
                )
                return [CornerRow(seq, cid, x, y) for seq, cid, x, y in rows]
        except SQLAlchemyError as exc:
            logger.error("corner query for building %s failed: %s", building_id, exc)
            return []

    def from_corners(self, building_id: int) -> List[CornerRow]:
        return self._corners(building_id, WallModel.from_corner_id)

    def to_corners(self, building_id: int) -> List[CornerRow]:
        return self._corners(building_id, WallModel.to_corner_id)


def open_geometry_database(url: str, create: bool = False) -> SqlGeometrySource:
    """Open a geometry database and log the tables it contains.

    ``url`` is a SQLAlchemy URL or a plain path to an SQLite file.
    """
    if "://" not in url:
        url = f"sqlite:///{url}"
    engine = create_engine(url)
    if create:
        create_schema(engine)
    tables = sorted(inspect(engine).get_table_names())
    logger.info("geometry database %s: tables=%s", url, tables)
    missing = {"Building", "Corner", "Wall"} - set(tables)
    if missing:
        logger.warning("geometry database %s lacks tables %s", url, sorted(missing))
    return SqlGeometrySource(sessionmaker(bind=engine))


def add_building_outline(
    db: Session,
    building_id: int,
    outline: Sequence[Tuple[float, float]],
    first_corner_id: Optional[int] = None,
) -> List[int]:
    """Insert a closed ring of corners and walls plus the bounding box.

    Returns the corner ids used. Ids continue after the largest existing
    corner id unless ``first_corner_id`` is given. A repeated first vertex at
    the end of ``outline`` is dropped.
    """
    outline = list(outline)
    if len(outline) > 1 and tuple(outline[-1]) == tuple(outline[0]):
        outline.pop()
    if first_corner_id is None:
        last = db.query(CornerModel.id).order_by(CornerModel.id.desc()).first()
        first_corner_id = (last[0] + 1) if last else 1
    xs = [float(p[0]) for p in outline]
    ys = [float(p[1]) for p in outline]
    db.add(BuildingModel(id=building_id, min_x=min(xs), min_y=min(ys), max_x=max(xs), max_y=max(ys)))
    ids = [first_corner_id + i for i in range(len(outline))]
    for cid, x, y in zip(ids, xs, ys):
        db.add(CornerModel(id=cid, x=x, y=y))
    for seq, cid in enumerate(ids):
        db.add(WallModel(
            building_id=building_id,
            sequence_number=seq,
            from_corner_id=cid,
            to_corner_id=ids[(seq + 1) % len(ids)],
        ))
    db.commit()
    return ids
