import numpy as np

from moviecore.catalog import DEMO_MOVIES
from moviecore.schemas import Gender, UserProfile
from moviecore.services.embedding import HashingTextEmbedder
from moviecore.services.profile import ProfileProjector, profile_descriptor


def test_descriptor_joins_fields_in_fixed_order():
    profile = UserProfile(
        location="Mumbai",
        gender=Gender.FEMALE,
        age=29.7,
        favorite_movies=[DEMO_MOVIES[0], DEMO_MOVIES[2]],
    )
    assert profile_descriptor(profile) == "Mumbai Female 29 Inception Dangal"


def test_empty_fields_keep_their_separators():
    assert profile_descriptor(UserProfile()) == "   "
    assert profile_descriptor(UserProfile(location="Pune")) == "Pune   "
    assert profile_descriptor(UserProfile(gender=Gender.NON_BINARY)) == " Non-binary  "


def test_empty_profile_projects_to_zero_vector():
    vector = ProfileProjector(HashingTextEmbedder()).project(UserProfile())
    assert vector.shape == (64,)
    assert not vector.any()


def test_age_alone_contributes_no_tokens():
    projector = ProfileProjector(HashingTextEmbedder())
    assert not projector.project(UserProfile(age=42)).any()


def test_projection_delegates_to_embedder():
    embedder = HashingTextEmbedder()
    profile = UserProfile(location="Lagos", gender=Gender.MALE, age=31, favorite_movies=[DEMO_MOVIES[3]])
    expected = embedder.embed("Lagos Male 31 Mad Max: Fury Road")
    assert np.array_equal(ProfileProjector(embedder).project(profile), expected)
