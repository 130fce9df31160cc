import random
from types import SimpleNamespace

import pytest

from app.core.errors import ProfileNotFound
from app.discovery.service import filter_by_distance, get_next_candidate, pick_candidate
from app.likes.models import LikeKind
from app.likes.schemas import LikeCreate
from app.likes.service import create_like
from tests.factories import full_profile, make_member, make_user_without_profile


async def _pool(db, viewer_id, rounds=25):
    seen = set()
    for seed in range(rounds):
        prof = await get_next_candidate(db, viewer_id, rng=random.Random(seed))
        if prof is not None:
            seen.add(prof.user_id)
    return seen


async def test_distance_scenario(db):
    a = await make_member(
        db, first_name="Alex", age=30, gender="male", interested_in=["female"],
        max_distance=50, latitude=37.77, longitude=-122.41,
    )
    b = await make_member(db, first_name="Bea", age=28, gender="female", latitude=37.78, longitude=-122.42)
    c = await make_member(db, first_name="Cata", age=28, gender="female", latitude=34.05, longitude=-118.24)

    pool = await _pool(db, a)
    assert b in pool
    assert c not in pool


async def test_never_returns_self_or_liked_users(db):
    viewer = await make_member(db, first_name="Vera", age=30, gender="female")
    others = [await make_member(db, first_name=f"P{i}", age=25 + i) for i in range(4)]

    await create_like(db, viewer, LikeCreate(to_user_id=others[0]))
    await create_like(db, viewer, LikeCreate(to_user_id=others[1], kind=LikeKind.PROFILE))

    pool = await _pool(db, viewer, rounds=40)
    assert viewer not in pool
    assert others[0] not in pool and others[1] not in pool
    assert pool == {others[2], others[3]}


async def test_photo_or_prompt_like_alone_excludes_the_user(db):
    viewer = await make_member(db, first_name="Vera", age=30, gender="female")
    by_photo = await make_member(db, first_name="Pablo", age=27, photos=1)
    by_prompt = await make_member(db, first_name="Quim", age=28, prompts=1)
    untouched = await make_member(db, first_name="Rui", age=29)

    photo_id = (await full_profile(db, by_photo)).photos[0].id
    answer_id = (await full_profile(db, by_prompt)).prompt_answers[0].id
    await create_like(db, viewer, LikeCreate(to_user_id=by_photo, kind=LikeKind.PHOTO, photo_id=photo_id))
    await create_like(
        db, viewer, LikeCreate(to_user_id=by_prompt, kind=LikeKind.PROMPT, prompt_answer_id=answer_id)
    )

    pool = await _pool(db, viewer, rounds=40)
    assert pool == {untouched}


async def test_empty_interested_in_shows_every_gender(db):
    viewer = await make_member(db, first_name="Vic", gender="male", interested_in=[])
    f = await make_member(db, first_name="Fer", gender="female")
    m = await make_member(db, first_name="Mau", gender="male")
    nb = await make_member(db, first_name="Noa", gender="non-binary")

    assert await _pool(db, viewer, rounds=40) == {f, m, nb}


async def test_gender_and_age_filters(db):
    viewer = await make_member(
        db, first_name="Vale", gender="female", interested_in=["male", "non-binary"],
        min_age=25, max_age=35,
    )
    ok = await make_member(db, first_name="Ok", gender="male", age=30)
    ok_nb = await make_member(db, first_name="Nb", gender="non-binary", age=25)
    await make_member(db, first_name="TooYoung", gender="male", age=24)
    await make_member(db, first_name="TooOld", gender="male", age=36)
    await make_member(db, first_name="Wrong", gender="female", age=30)

    assert await _pool(db, viewer, rounds=40) == {ok, ok_nb}


async def test_candidates_without_location_are_kept(db):
    viewer = await make_member(db, first_name="Geo", latitude=37.77, longitude=-122.41, max_distance=10)
    nowhere = await make_member(db, first_name="Nowhere")
    far = await make_member(db, first_name="Far", latitude=40.71, longitude=-74.0)

    pool = await _pool(db, viewer)
    assert nowhere in pool
    assert far not in pool


async def test_viewer_without_location_skips_distance_filter(db):
    viewer = await make_member(db, first_name="Lost")
    far = await make_member(db, first_name="Far", latitude=40.71, longitude=-74.0)

    assert await _pool(db, viewer) == {far}


async def test_no_more_profiles_returns_none(db):
    viewer = await make_member(db, first_name="Solo")
    assert await get_next_candidate(db, viewer) is None


async def test_viewer_without_profile_fails(db):
    nobody = await make_user_without_profile(db)
    with pytest.raises(ProfileNotFound):
        await get_next_candidate(db, nobody)


async def test_candidate_comes_with_ordered_photos_and_prompts(db):
    viewer = await make_member(db, first_name="Viewer")
    await make_member(db, first_name="Full", photos=3, prompts=2)

    prof = await get_next_candidate(db, viewer)
    assert [p.order for p in prof.photos] == [0, 1, 2]
    assert [pa.order for pa in prof.prompt_answers] == [0, 1]
    assert all(pa.prompt is not None for pa in prof.prompt_answers)


def test_pick_candidate_only_draws_from_top_of_batch():
    batch = [SimpleNamespace(user_id=str(i)) for i in range(30)]
    rng = random.Random(7)
    picked = {pick_candidate(batch, top=10, rng=rng).user_id for _ in range(300)}
    assert picked <= {str(i) for i in range(10)}
    assert len(picked) > 1


def test_pick_candidate_small_batch_and_empty():
    assert pick_candidate([]) is None
    only = SimpleNamespace(user_id="x")
    assert pick_candidate([only], top=10) is only


def test_filter_by_distance_keeps_unknown_locations():
    viewer = SimpleNamespace(has_location=True, latitude=37.77, longitude=-122.41, max_distance=50)
    near = SimpleNamespace(has_location=True, latitude=37.78, longitude=-122.42)
    far = SimpleNamespace(has_location=True, latitude=34.05, longitude=-118.24)
    unknown = SimpleNamespace(has_location=False, latitude=None, longitude=None)

    assert filter_by_distance(viewer, [near, far, unknown]) == [near, unknown]
