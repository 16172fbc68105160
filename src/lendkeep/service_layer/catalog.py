"""Catalog registration handlers."""

import logging

from lendkeep.domain.errors import InvalidInputError
from lendkeep.domain.models import Item, Requester
from lendkeep.interfaces.id_generator import IdGenerator
from lendkeep.interfaces.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


def _required(field: str, value: str) -> str:
    if not (cleaned := value.strip()):
        raise InvalidInputError(field, value, "must not be blank")
    return cleaned


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def register_item(  # pylint: disable=too-many-arguments
    uow: AbstractUnitOfWork,
    id_generator: IdGenerator,
    title: str,
    *,
    author: str | None = None,
    isbn: str | None = None,
    genre: str | None = None,
) -> Item:
    """Add a new, available item to the catalog."""

    item = Item(
        id=id_generator.new_id(),
        title=_required("title", title),
        author=_optional(author),
        isbn=_optional(isbn),
        genre=_optional(genre),
    )
    with uow:
        uow.items.add(item)
        uow.commit()
    logger.info("Registered item %s (%s)", item.id, item.title)
    return item


def register_requester(
    uow: AbstractUnitOfWork, id_generator: IdGenerator, name: str, contact: str
) -> Requester:
    """Add a new requester reachable at `contact`."""

    requester = Requester(
        id=id_generator.new_id(),
        name=_required("name", name),
        contact=_required("contact", contact),
    )
    with uow:
        uow.requesters.add(requester)
        uow.commit()
    logger.info("Registered requester %s", requester.id)
    return requester
