"""Tests for content lookup and per-theme defaults."""

import json

import pytest

import devotional_service
from devotional_service import DevotionalCorpus
from models import Devotional, Theme


def test_first_presence_record(full_corpus):
  devotional = full_corpus.devotional_for(Theme.PRESENCE, 1)
  assert devotional.theme == Theme.PRESENCE
  assert devotional.invocation == "presence invocation 1"
  assert devotional.scripture.reference == "presence reference 1"


def test_lookup_preserves_corpus_order_per_theme(full_corpus):
  devotional = full_corpus.devotional_for(Theme.HEALING, 17)
  assert devotional.teaching == "healing teaching 17"


@pytest.mark.parametrize("day", [0, -1, 32, 1000])
def test_out_of_range_days_are_not_found(full_corpus, day):
  assert full_corpus.devotional_for(Theme.PRESENCE, day) is None


def test_short_corpus_does_not_wrap(small_corpus):
  assert small_corpus.devotional_for(Theme.TRUTH, 1) is not None
  assert small_corpus.devotional_for(Theme.TRUTH, 2) is None


def test_integrated_theme_has_no_entries(full_corpus):
  assert full_corpus.count_for_theme(Theme.INTEGRATED) == 0
  assert full_corpus.devotional_for(Theme.INTEGRATED, 1) is None


def test_count_for_theme(small_corpus):
  assert small_corpus.count_for_theme(Theme.PRESENCE) == 2
  assert small_corpus.count_for_theme(Theme.TRUTH) == 1
  assert len(small_corpus) == 5


def test_missing_fields_take_theme_defaults(full_corpus):
  devotional = full_corpus.devotional_for(Theme.HEALING, 3)
  defaults = devotional_service.DEFAULT_PROMISES[Theme.HEALING]
  assert devotional.promise_for_the_day == defaults["promise_for_the_day"]
  assert devotional.promise_image == defaults["promise_image"]
  assert (
      devotional.devotional_image
      == "/static/images/devotionals/healing/healing-default.svg"
  )


def test_record_values_are_kept(make_corpus, make_entry):
  corpus = make_corpus(
      {"presence": 1},
      extra_entries=[
          make_entry(
              "presence",
              2,
              promiseForTheDay="Custom promise",
              promiseImage="/static/images/custom-promise.svg",
              localPath="/static/images/devotionals/presence/presence-02.svg",
          )
      ],
  )
  devotional = corpus.devotional_for(Theme.PRESENCE, 2)
  assert devotional.promise_for_the_day == "Custom promise"
  assert devotional.promise_image == "/static/images/custom-promise.svg"
  assert (
      devotional.devotional_image
      == "/static/images/devotionals/presence/presence-02.svg"
  )


def test_empty_promise_string_falls_back(make_corpus, make_entry):
  corpus = make_corpus(
      {"truth": 0},
      extra_entries=[make_entry("truth", 1, promiseForTheDay="")],
  )
  devotional = corpus.devotional_for(Theme.TRUTH, 1)
  assert devotional.promise_for_the_day.startswith("Truth illuminates")


def test_devotional_image_key_is_accepted(make_corpus, make_entry):
  corpus = make_corpus(
      {"truth": 0},
      extra_entries=[make_entry("truth", 1, devotionalImage="/img/t1.jpg")],
  )
  assert corpus.devotional_for(Theme.TRUTH, 1).devotional_image == "/img/t1.jpg"


def test_lookup_does_not_mutate_the_stored_record(full_corpus):
  full_corpus.devotional_for(Theme.TRUTH, 4)
  raw = full_corpus.raw_devotional(Theme.TRUTH, 4)
  assert raw.devotional_image is None
  assert raw.promise_for_the_day is None


def test_devotional_for_rotation_day(full_corpus):
  devotional = full_corpus.devotional_for_rotation_day(45)
  assert devotional.theme == Theme.TRUTH
  assert devotional.invocation == "truth invocation 15"


def test_unknown_theme_in_corpus_is_rejected(make_entry):
  with pytest.raises(ValueError):
    DevotionalCorpus.from_json_data(
        {"devotionals": [make_entry("gratitude", 1)]}
    )


def test_from_file(tmp_path, make_entry):
  path = tmp_path / "devotionals.json"
  path.write_text(
      json.dumps({"devotionals": [make_entry("presence", 1)]}),
      encoding="utf-8",
  )
  corpus = DevotionalCorpus.from_file(str(path))
  assert corpus.count_for_theme(Theme.PRESENCE) == 1


def test_bundled_corpus_loads():
  corpus = devotional_service.get_corpus()
  assert len(corpus) > 0
  for theme in (Theme.PRESENCE, Theme.HEALING, Theme.TRUTH):
    assert corpus.devotional_for(theme, 1) is not None


def test_to_dict_round_trips_field_names(full_corpus):
  data = full_corpus.devotional_for(Theme.PRESENCE, 5).to_dict()
  assert data["day"] == "presence"
  assert data["reflection"] == "presence reflection 5"
  assert Devotional.from_dict(data).physical_action == "presence action 5"
