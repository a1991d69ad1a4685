# streamdeckctl

Helpers that keep a live-stream scoreboard's fields up to date: tournament
and match data from Challonge and smash.gg, round names for brackets, tweet
details with their images, and timestamp buttons.

The package uses only the standard library.

## Install

```
pip install streamdeckctl
```

## What is inside

- `streamdeckctl.rounds` names tournament rounds and looks up matches.
  - `TournamentType` covers single elimination, double elimination and
    round robin. `TournamentType.from_name` falls back to double
    elimination.
  - `get_phase`, `single_elimination_phase`, `double_elimination_phase`,
    `winners_rounds` and `losers_rounds` compute round names and counts.
  - `matches_for_round`, `match_by_id` and `prerequisite_matches` find
    matches in a tournament's list of `{"match": {...}}` records.
- `streamdeckctl.provider` holds the field models and the panel base class.
  - The field models are `LineField`, `SpinField`, `CheckField` and
    `ChoiceBox`.
  - `TournamentTreeNode` is a bracket node.
  - `ProviderWidget` is the base class. It fills the player, country,
    stage and bracket fields, resets the clear-on-new-match fields,
    fills bracket slots, and writes the tournament JSON to
    `settings["outputPath"] + output_file_name`.
- `streamdeckctl.challonge`: `ChallongeWidget` lists in-progress
  tournaments and a tournament's open matches. It can also fill the top 16
  slots of a double elimination bracket. It authenticates with HTTP Basic,
  using the `challonge>username` and `challonge>apiKey` settings. The
  optional `challonge>organization` setting adds a subdomain filter.
- `streamdeckctl.smashgg`: `SmashggWidget` lists an owner's tournaments
  (`smashgg>ownerId`) and the sets on a tournament's stream queue. It can
  filter the sets by `smashgg>streamName`, and it authenticates with a
  bearer token from `smashgg>authenticationToken`.
- `streamdeckctl.builder`: `ProviderWidgetBuilder` collects the field ids
  and bracket slots for a panel. `build(Provider.CHALLONGE)` or
  `build(Provider.SMASHGG)` then creates it.
- `streamdeckctl.twitter`: `parse_tweet_url` extracts the user name and
  status id from a tweet URL. `TwitterWidget` fetches a tweet, keeps its
  text, author, date, URLs and media, and saves the author's profile
  picture and the tweet's first photo under its `path`.
- `streamdeckctl.tsbutton`: `TimestampButton` keeps a button's active
  state and its last timestamp.

Network access goes through a `sender` callable. It receives a
`urllib.request.Request` and returns `(body_bytes, failed)`. The default
sender uses `urllib`. Pass your own sender to use a different transport or
to test without a network.

## Example

```python
from streamdeckctl.rounds import TournamentType, get_phase

get_phase(TournamentType.SINGLE_ELIMINATION, 3, 8)   # "Final"
get_phase(TournamentType.ROUND_ROBIN, 2, 6)          # "Round 2"
```

Filling scoreboard fields from a Challonge tournament response:

```python
import json

from streamdeckctl.builder import Provider, ProviderWidgetBuilder
from streamdeckctl.provider import LineField

fields = {"p1": LineField(), "p2": LineField(), "stage": LineField()}
builder = ProviderWidgetBuilder(
    fields, {"challonge>username": "user", "challonge>apiKey": "placeholder"}
)
builder.set_player_name_widgets("p1", "p2")
builder.set_tournament_stage_widget("stage")
panel = builder.build(Provider.CHALLONGE)

body = json.dumps({"tournament": {
    "name": "Weekly",
    "tournament_type": "single elimination",
    "participants_count": 2,
    "participants": [
        {"participant": {"id": 1, "name": "Alice"}},
        {"participant": {"id": 2, "name": "Bob"}},
    ],
    "matches": [
        {"match": {"id": 10, "state": "open", "round": 1,
                   "player1_id": 1, "player2_id": 2}},
    ],
}})
panel.process_tournament_json(body, failed=False)
panel.set_match_data()
fields["p1"].text, fields["p2"].text, fields["stage"].text  # ("Alice", "Bob", "Final")
```

## What it does not do

This package has no window or command-line program. It models the fields
a scoreboard shows, but it does not draw them. It does not read layout
files, and it does not save the scoreboard to XML or JSON output files.
The one exception is the bracket file that `ProviderWidget` writes.

It has no global hotkeys and no key-code conversion. It does not obtain
Twitter tokens itself. `TwitterWidget` needs a handler object with
`linked()`, `token()` and `link()` methods.

## Running the tests

```
pip install streamdeckctl[test]
pytest
```