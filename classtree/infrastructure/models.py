"""SQLAlchemy models for the taxonomy tables.

Foreign keys declare the cascade rules the engine relies on: deleting a
class removes its descendants, class params, products and product values;
deleting a product removes its values.
"""

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from classtree.infrastructure.database import Base


class OrganizationalUnitModel(Base):
    """Naming/ownership entity attached to classes and params."""

    __tablename__ = "organizational_units"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(250), nullable=False, unique=True)
    short_name: Mapped[str] = mapped_column(String(20), nullable=False, default="")

    __table_args__ = (
        CheckConstraint("length(name) > 0", name="ck_units_name_not_empty"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<OrganizationalUnitModel(id={self.id}, name={self.name})>"


class ValueTypeModel(Base):
    """Scalar type a param may hold."""

    __tablename__ = "value_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)

    __table_args__ = (
        CheckConstraint("length(name) > 0", name="ck_value_types_name_not_empty"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ValueTypeModel(id={self.id}, name={self.name})>"


class ParamModel(Base):
    """Reusable named, typed attribute definition."""

    __tablename__ = "params"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    value_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("value_types.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Reset to no unit when the owning unit is deleted
    unit_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("organizational_units.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Relationships
    value_type: Mapped["ValueTypeModel"] = relationship("ValueTypeModel", lazy="joined")
    unit: Mapped["OrganizationalUnitModel | None"] = relationship(
        "OrganizationalUnitModel", lazy="joined"
    )

    __table_args__ = (
        CheckConstraint("length(name) > 0", name="ck_params_name_not_empty"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ParamModel(id={self.id}, name={self.name})>"


class ClassModel(Base):
    """Node of the class tree.

    A root has no parent. The parent relation is a tree: a class is only
    ever inserted under an already stored class.
    """

    __tablename__ = "classes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(300), nullable=False, unique=True)
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("classes.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    unit_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizational_units.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Relationships
    unit: Mapped["OrganizationalUnitModel"] = relationship(
        "OrganizationalUnitModel", lazy="joined"
    )

    __table_args__ = (
        CheckConstraint("length(name) > 0", name="ck_classes_name_not_empty"),
        UniqueConstraint("id", "parent_id", name="uq_classes_id_parent"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ClassModel(id={self.id}, name={self.name}, parent_id={self.parent_id})>"


class ClassParamModel(Base):
    """Binding of a param to the class that declares it."""

    __tablename__ = "class_params"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    class_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("classes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    param_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("params.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Relationships
    param: Mapped["ParamModel"] = relationship("ParamModel", lazy="joined")

    __table_args__ = (
        UniqueConstraint("class_id", "param_id", name="uq_class_params_class_param"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ClassParamModel(id={self.id}, class_id={self.class_id}, param_id={self.param_id})>"


class ProductModel(Base):
    """Concrete instance attached to a leaf class."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(300), nullable=False, unique=True)
    class_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("classes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        CheckConstraint("length(name) > 0", name="ck_products_name_not_empty"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductModel(id={self.id}, name={self.name}, class_id={self.class_id})>"


class ProductParamValueModel(Base):
    """Value a product holds for one inherited class param."""

    __tablename__ = "product_param_values"

    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    )
    class_param_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("class_params.id", ondelete="CASCADE"),
        primary_key=True,
    )
    value: Mapped[str] = mapped_column(String(300), nullable=False, default="")

    # Relationships
    class_param: Mapped["ClassParamModel"] = relationship("ClassParamModel", lazy="joined")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ProductParamValueModel(product_id={self.product_id}, "
            f"class_param_id={self.class_param_id})>"
        )
