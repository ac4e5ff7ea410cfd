from prop_ses.normalize import normalize_person_name, normalize_team_key


def test_normalize_person_name_strips_accents_and_punctuation() -> None:
    assert normalize_person_name("Nikola Jokić") == "nikolajokic"
    assert normalize_person_name("Jaren Jackson Jr.") == "jarenjacksonjr"
    assert normalize_person_name("Karl-Anthony Towns") == "karlanthonytowns"


def test_normalize_team_key() -> None:
    assert normalize_team_key("LA Lakers") == normalize_team_key("la-lakers")
    assert normalize_team_key(None) == ""
    assert normalize_team_key("") == ""


def test_normalize_person_name_keeps_non_latin_names() -> None:
    assert normalize_person_name("王哲林") == "王哲林"
    assert normalize_person_name(" 王哲林 ") != normalize_person_name("周琦")
    assert normalize_person_name("Алексей Швед") == "алексейшвед"


def test_normalize_team_key_resolves_abbreviations() -> None:
    assert normalize_team_key("NYK") == normalize_team_key("New York Knicks")
    assert normalize_team_key("gsw") == normalize_team_key("Golden State Warriors")
    assert normalize_team_key("BOS") != normalize_team_key("NYK")
    assert normalize_team_key("Duke") == "duke"
