"""Pure functions over the category hierarchy.

The store keeps parent_category_id as a plain back-reference and does not
stop cycles from being written. These traversals work on a list of
Category records and detect loops instead of assuming there are none:
- No I/O operations
- No side effects
- Easy to test
"""

from collections.abc import Iterator, Sequence

from tally.domain.models import Category, CategoryId


class CategoryCycleError(ValueError):
    """Raised when following parent links revisits a category."""

    def __init__(self, cycle: list[CategoryId]) -> None:
        self.cycle = cycle
        path = " -> ".join(str(category_id) for category_id in cycle)
        super().__init__(f"Category hierarchy contains a cycle: {path}")


def build_children_index(categories: Sequence[Category]) -> dict[CategoryId | None, list[Category]]:
    """Group categories by parent id.

    Categories whose parent is not in the list are treated as roots (key None),
    which is how children of archived parents show up in a list of active rows.
    Children keep the order of the input list.
    """
    known = {category.id for category in categories}
    index: dict[CategoryId | None, list[Category]] = {}
    for category in categories:
        parent = category.parent_category_id if category.parent_category_id in known else None
        index.setdefault(parent, []).append(category)
    return index


def ancestors(categories: Sequence[Category], category_id: CategoryId) -> list[Category]:
    """Return the chain of parents of a category, nearest first.

    Args:
        categories: Categories to search.
        category_id: Category whose ancestors to list.

    Returns:
        List of ancestor categories; empty for a root or an unknown id.

    Raises:
        CategoryCycleError: If the parent links loop.
    """
    by_id = {category.id: category for category in categories}
    current = by_id.get(category_id)
    if current is None:
        return []

    seen = [current.id]
    chain: list[Category] = []
    while current.parent_category_id is not None:
        parent = by_id.get(current.parent_category_id)
        if parent is None:
            break
        if parent.id in seen:
            raise CategoryCycleError(seen[seen.index(parent.id) :] + [parent.id])
        seen.append(parent.id)
        chain.append(parent)
        current = parent
    return chain


def find_cycle(categories: Sequence[Category]) -> list[CategoryId] | None:
    """Find one parent-link cycle, if any.

    Returns:
        Ids along the cycle with the first id repeated at the end
        (e.g. [3, 5, 3]), or None if the hierarchy is a forest.
    """
    for category in categories:
        try:
            ancestors(categories, category.id)
        except CategoryCycleError as e:
            return e.cycle
    return None


def walk_tree(categories: Sequence[Category]) -> Iterator[tuple[int, Category]]:
    """Yield (depth, category) pairs depth-first from the roots.

    Categories caught in a cycle are never reachable from a root and are not
    yielded; use find_cycle to report them.
    """
    index = build_children_index(categories)
    stack = [(0, category) for category in reversed(index.get(None, []))]
    visited: set[CategoryId] = set()
    while stack:
        depth, category = stack.pop()
        if category.id in visited:
            continue
        visited.add(category.id)
        yield depth, category
        for child in reversed(index.get(category.id, [])):
            stack.append((depth + 1, child))
