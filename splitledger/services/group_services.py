import logging
from typing import Iterable, Optional
from splitledger.core.errors import AlreadyMember, GroupNotFound, InvalidIdentity
from splitledger.core.utils import is_null_identity
from splitledger.db.repository import StorageSession
from splitledger.schemas.group import GroupOut

logger = logging.getLogger("splitledger.groups")


async def create_group(db: StorageSession, creator: str, initial_members: Iterable[Optional[str]] = ()) -> GroupOut:
    if is_null_identity(creator):
        raise InvalidIdentity("Group creator is required")

    group_id = await db.create_group(creator)
    members = [creator]

    # null identities and repeats are skipped, not rejected
    for user in initial_members:
        if is_null_identity(user) or user in members:
            continue
        await db.add_member(group_id, user)
        members.append(user)

    logger.info("Group %s created by %s with %d members", group_id, creator, len(members))
    return GroupOut(id=group_id, owner=creator, members=members)


async def get_group(db: StorageSession, group_id: int) -> GroupOut:
    group = await db.get_group(group_id)
    if group is None:
        raise GroupNotFound(f"Group {group_id} does not exist")
    return group


def is_member(group: GroupOut, user: str) -> bool:
    # linear scan, groups are small
    for member in group.members:
        if member == user:
            return True
    return False


async def add_member(db: StorageSession, group_id: int, user: str) -> GroupOut:
    if is_null_identity(user):
        raise InvalidIdentity("Joining user is required")

    group = await get_group(db, group_id)

    if is_member(group, user):
        raise AlreadyMember(f"{user} is already a member of group {group_id}")

    await db.add_member(group_id, user)

    logger.info("%s joined group %s", user, group_id)
    return GroupOut(id=group.id, owner=group.owner, members=[*group.members, user])


async def list_group_for_user(db: StorageSession, user: str) -> set[int]:
    return await db.get_user_groups(user)
