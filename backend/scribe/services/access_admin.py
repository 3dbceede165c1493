"""Administrative replacement of access lists.

Every operation replaces the full set for its target; there is no
incremental add/remove.  Role checks happen in the route dependency before
these are called.
"""

import logging
from collections.abc import Iterable

from scribe.services.grants import SqlGrantStore, normalize_ids

logger = logging.getLogger(__name__)


async def set_blog_access_list(grants: SqlGrantStore, *, blog_id: int, user_ids: Iterable[int]) -> set[int]:
    result = await grants.replace_blog_access_list(blog_id, normalize_ids(user_ids))
    logger.info("Replaced access list for blog %s (%d users)", blog_id, len(result))
    return result


async def set_post_access_list(grants: SqlGrantStore, *, post_id: int, user_ids: Iterable[int]) -> set[int]:
    result = await grants.replace_post_grants(post_id, normalize_ids(user_ids))
    logger.info("Replaced access list for post %s (%d users)", post_id, len(result))
    return result


async def set_user_blog_access(grants: SqlGrantStore, *, user_id: int, blog_ids: Iterable[int]) -> set[int]:
    result = await grants.replace_blog_grants(user_id, normalize_ids(blog_ids))
    logger.info("Replaced blog access for user %s (%d blogs)", user_id, len(result))
    return result


async def get_blog_access_list(grants: SqlGrantStore, *, blog_id: int) -> set[int]:
    return await grants.list_blog_grantees(blog_id)


async def get_post_access_list(grants: SqlGrantStore, *, post_id: int) -> set[int]:
    return await grants.list_post_grantees(post_id)


async def get_user_blog_access(grants: SqlGrantStore, *, user_id: int) -> set[int]:
    return await grants.list_user_blog_ids(user_id)
