"""Integration tests for end-to-end workflows."""

import asyncio
import json
from unittest.mock import patch

import openpyxl
import pytest

import autoscorer
from badqb.config import (
    clear_config_cache,
    get_config,
    get_current_season,
    get_current_week,
    get_locked_weeks,
    get_total_weeks,
    get_week_range,
    is_week_locked,
    load_config,
    save_config,
)
from badqb.excel_export import export_standings_workbook
from badqb.league_data import (
    detect_current_week,
    import_week_stats,
    load_league,
    load_lineups,
    save_standings_json,
    save_week_results,
)
from badqb.models import RawWeeklyStats
from badqb.standings import StandingsEngine
from badqb.stats_source import InMemoryStatsStore


def write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(data, f, indent=2)


@pytest.fixture
def temp_data_dir(tmp_path):
    """Create temporary league data directory with test files."""
    data_dir = tmp_path / 'data'

    write_json(
        data_dir / 'league_config.json',
        {'season': 2025, 'current_week': 1, 'total_weeks': 18},
    )
    write_json(
        data_dir / 'teams.json',
        {
            'teams': [
                {'name': 'Paul Johnson', 'roster': ['Cleveland', 'Miami', 'Houston', 'Buffalo']},
                {'name': 'Max Athorn', 'roster': ['NY Giants', 'New England', 'Denver', 'Cincinnati']},
                {'name': 'Jacob Frush', 'roster': ['New Orleans', 'Chicago', 'Jacksonville', 'Baltimore']},
                {'name': 'Devin Jones', 'roster': ['Indianapolis', 'Atlanta', 'Arizona', 'Tampa Bay']},
            ]
        },
    )
    (data_dir / 'schedule.txt').write_text(
        'Week 1: Paul Johnson versus Max Athorn, Jacob Frush versus Devin Jones\n'
        'Week 2: Paul Johnson versus Jacob Frush, Max Athorn versus Devin Jones\n'
    )
    write_json(
        data_dir / 'lineups' / 'week_1.json',
        {
            'week': 1,
            'lineups': {
                'Paul Johnson': {'franchises': ['Cleveland', 'Miami']},
                'Max Athorn': {'franchises': ['NY Giants', 'New England'], 'locked': True},
                'Jacob Frush': {'franchises': ['New Orleans', 'Chicago']},
                'Devin Jones': {'franchises': ['Indianapolis', 'Atlanta']},
            },
        },
    )
    write_json(
        data_dir / 'stats' / 'week_1.json',
        {
            'week': 1,
            'stats': [
                {
                    'franchise': 'CLE', 'pass_yards': 290, 'touchdowns': 1,
                    'completion_percent': 68.89, 'interceptions': 1, 'fumbles': 1,
                },
                {
                    'franchise': 'MIA', 'pass_yards': 146, 'touchdowns': 1,
                    'completion_percent': 61.29, 'interceptions': 1, 'fumbles': 2, 'benching': 1,
                },
                {'franchise': 'NYG', 'pass_yards': 250, 'touchdowns': 1, 'completion_percent': 65.0},
                {'franchise': 'NE', 'pass_yards': 250, 'touchdowns': 1, 'completion_percent': 65.0},
                {'franchise': 'NO', 'pass_yards': 95, 'touchdowns': 0, 'completion_percent': 45.0},
                {'franchise': 'CHI', 'pass_yards': 250, 'touchdowns': 1, 'completion_percent': 65.0},
                {'franchise': 'IND', 'pass_yards': 250, 'touchdowns': 1, 'completion_percent': 65.0},
                {'franchise': 'ATL', 'pass_yards': 250, 'touchdowns': 1, 'completion_percent': 65.0},
            ],
        },
    )
    return data_dir


class TestConfigIntegration:
    """Tests for the league configuration file."""

    def test_repo_config_loads(self, monkeypatch):
        """Test the bundled data/league_config.json is valid."""
        monkeypatch.delenv('BADQB_DATA_DIR', raising=False)
        clear_config_cache()
        config = get_config()
        assert get_current_season() == config.season == 2025
        assert get_current_week() == 1
        assert get_total_weeks() == 18
        assert get_week_range() == range(1, 19)
        assert get_locked_weeks() == []
        assert not is_week_locked(1)
        assert config.count_turnover_events is False

    def test_config_is_cached(self):
        """Test repeated calls return the cached object."""
        clear_config_cache()
        assert get_config() is get_config()

    def test_data_dir_from_environment(self, tmp_path, monkeypatch):
        """Test BADQB_DATA_DIR selects another league's config."""
        write_json(tmp_path / 'league_config.json', {'season': 2026, 'current_week': 4})
        monkeypatch.setenv('BADQB_DATA_DIR', str(tmp_path))
        clear_config_cache()
        try:
            assert get_current_season() == 2026
            assert get_current_week() == 4
        finally:
            clear_config_cache()

    def test_save_config_clears_cache(self, tmp_path, monkeypatch):
        """Test saved settings are visible to the next get_config()."""
        path = tmp_path / 'league_config.json'
        write_json(path, {'season': 2025, 'current_week': 2})
        monkeypatch.setenv('BADQB_DATA_DIR', str(tmp_path))
        clear_config_cache()
        try:
            config = get_config()
            save_config(config.model_copy(update={'current_week': 3}), path)
            assert get_current_week() == 3
            assert load_config(path).current_week == 3
        finally:
            clear_config_cache()

    def test_load_explicit_config(self, tmp_path):
        """Test loading a config file with locked weeks."""
        path = tmp_path / 'league_config.json'
        write_json(path, {'season': 2024, 'current_week': 5, 'locked_weeks': [3, 1, 3]})
        config = load_config(path)
        assert config.season == 2024
        assert config.locked_weeks == [1, 3]
        assert config.lineup_size == 2

    def test_invalid_config(self, tmp_path):
        """Test unknown keys and out-of-range weeks are rejected."""
        path = tmp_path / 'league_config.json'
        write_json(path, {'season': 2025, 'current_week': 19})
        with pytest.raises(ValueError, match='Schema validation failed'):
            load_config(path)

        write_json(path, {'season': 2025, 'playoff_teams': 4})
        with pytest.raises(ValueError):
            load_config(path)

    def test_missing_config(self, tmp_path):
        """Test a missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / 'league_config.json')


class TestLoadLeague:
    """Tests for loading a league data directory."""

    def test_load_league(self, temp_data_dir):
        """Test every data file is loaded into the snapshot."""
        league = load_league(temp_data_dir)
        assert league.config.season == 2025
        assert [t.name for t in league.teams][:2] == ['Paul Johnson', 'Max Athorn']
        assert len(league.lineups) == 4
        assert len(league.matchups) == 4
        assert league.errors == []
        assert league.stats.available_weeks() == [1]

    def test_lineup_locked_flag_loaded(self, temp_data_dir):
        """Test the locked flag is carried onto the lineup."""
        lineups = {lineup.team: lineup for lineup in load_lineups(temp_data_dir / 'lineups')}
        assert lineups['Max Athorn'].locked
        assert not lineups['Paul Johnson'].locked

    def test_invalid_lineup_strict(self, temp_data_dir):
        """Test a lineup with a franchise off the roster fails strict loading."""
        write_json(
            temp_data_dir / 'lineups' / 'week_2.json',
            {'week': 2, 'lineups': {'Paul Johnson': {'franchises': ['Cleveland', 'Denver']}}},
        )
        with pytest.raises(ValueError, match='Denver is not on the roster'):
            load_league(temp_data_dir)

        league = load_league(temp_data_dir, strict=False)
        assert league.errors == ['Paul Johnson week 2: Denver is not on the roster']

    def test_lineup_file_for_another_week(self, temp_data_dir):
        """Test a week_N.json file holding another week's lineups is rejected."""
        write_json(
            temp_data_dir / 'lineups' / 'week_2.json',
            {'week': 1, 'lineups': {'Paul Johnson': {'franchises': ['Houston', 'Buffalo']}}},
        )
        with pytest.raises(ValueError, match=r"doesn't match file name \(week_2.json\)"):
            load_lineups(temp_data_dir / 'lineups')
        with pytest.raises(ValueError, match='week_2.json'):
            load_league(temp_data_dir, strict=False)

    def test_unknown_franchise_in_lineup_file(self, temp_data_dir):
        """Test lineup files with unknown franchises fail schema validation."""
        write_json(
            temp_data_dir / 'lineups' / 'week_2.json',
            {'week': 2, 'lineups': {'Paul Johnson': {'franchises': ['Cleveland', 'London']}}},
        )
        with pytest.raises(ValueError, match='Schema validation failed'):
            load_league(temp_data_dir)

    def test_roster_size_enforced(self, temp_data_dir):
        """Test three-franchise rosters are rejected."""
        teams = json.loads((temp_data_dir / 'teams.json').read_text())
        teams['teams'][0]['roster'] = ['Cleveland', 'Miami', 'Houston']
        write_json(temp_data_dir / 'teams.json', teams)
        with pytest.raises(ValueError, match='Paul Johnson has 3 franchises'):
            load_league(temp_data_dir)

    def test_missing_teams_file(self, temp_data_dir):
        """Test a missing teams.json raises FileNotFoundError."""
        (temp_data_dir / 'teams.json').unlink()
        with pytest.raises(FileNotFoundError):
            load_league(temp_data_dir)

    def test_schedule_optional(self, temp_data_dir):
        """Test a league without schedule.txt has no matchups."""
        (temp_data_dir / 'schedule.txt').unlink()
        assert load_league(temp_data_dir).matchups == []

    def test_standings_from_files(self, temp_data_dir):
        """Test standings computed from a loaded league."""
        league = load_league(temp_data_dir)
        engine = StandingsEngine.from_config(league.lineups, league.stats, league.config)
        records = asyncio.run(engine.standings(league.matchups, league.teams))

        by_name = {r.team_name: r for r in records}
        assert by_name['Paul Johnson'].total_points == 59
        assert by_name['Paul Johnson'].record == '1-0'
        assert by_name['Max Athorn'].record == '0-1'
        # New Orleans: 95 yds (+25), 0 TD (+10), 45% (+5)
        assert by_name['Jacob Frush'].total_points == 40
        assert records[0].team_name == 'Paul Johnson'


class TestImportWeekStats:
    """Tests for importing a week of stats."""

    def test_first_import_advances_week(self):
        """Test importing the current week advances to the next one."""
        store = InMemoryStatsStore()
        result = import_week_stats(store, 3, [RawWeeklyStats('Miami', 3)], current_week=3, total_weeks=18)
        assert result.success
        assert result.records_imported == 1
        assert not result.replaced_existing
        assert result.new_current_week == 4
        assert result.week_advanced

    def test_reimport_replaces(self):
        """Test re-importing a week reports the replace and keeps only the new rows."""
        store = InMemoryStatsStore()
        import_week_stats(store, 3, [RawWeeklyStats('Miami', 3), RawWeeklyStats('Houston', 3)], 3, 18)
        result = import_week_stats(store, 3, [RawWeeklyStats('Buffalo', 3)], current_week=4, total_weeks=18)

        assert result.replaced_existing
        assert not result.week_advanced
        assert list(asyncio.run(store.get_week_stats(3))) == ['Buffalo']

    def test_past_week_does_not_advance(self):
        """Test correcting an old week leaves the current week alone."""
        result = import_week_stats(InMemoryStatsStore(), 2, [RawWeeklyStats('Miami', 2)], 8, 18)
        assert result.new_current_week is None

    def test_final_week_caps(self):
        """Test the current week never passes the final week."""
        result = import_week_stats(InMemoryStatsStore(), 18, [RawWeeklyStats('Miami', 18)], 18, 18)
        assert result.success
        assert result.new_current_week is None

    def test_empty_import(self):
        """Test importing nothing is an error, not a wipe."""
        store = InMemoryStatsStore({3: [RawWeeklyStats('Miami', 3)]})
        result = import_week_stats(store, 3, [], 3, 18)
        assert not result.success
        assert result.errors == ['No stat lines to import for week 3']
        assert store.available_weeks() == [3]

    def test_mismatched_rows(self):
        """Test rows for the wrong week are reported, not raised."""
        result = import_week_stats(InMemoryStatsStore(), 3, [RawWeeklyStats('Miami', 4)], 3, 18)
        assert not result.success
        assert 'expected 3' in result.errors[0]

    def test_detect_current_week(self):
        """Test the current week follows the last week with stats."""
        store = InMemoryStatsStore()
        assert asyncio.run(detect_current_week(store, 18)) == 1
        store.import_week(1, [RawWeeklyStats('Miami', 1)])
        store.import_week(2, [RawWeeklyStats('Miami', 2)])
        assert asyncio.run(detect_current_week(store, 18)) == 3
        store.import_week(18, [RawWeeklyStats('Miami', 18)])
        assert asyncio.run(detect_current_week(store, 18)) == 18


class TestOutput:
    """Tests for JSON and Excel output."""

    @pytest.fixture
    def scored(self, temp_data_dir):
        league = load_league(temp_data_dir)
        engine = StandingsEngine.from_config(league.lineups, league.stats, league.config)

        async def run():
            records = await engine.standings(league.matchups, league.teams)
            week = [s async for s in engine.counted_matchups(league.matchups)]
            return records, week

        return asyncio.run(run())

    def test_save_standings_json(self, tmp_path, scored):
        """Test standings JSON holds ranked records with weekly results."""
        records, _ = scored
        path = tmp_path / 'out' / 'standings.json'
        save_standings_json(path, records)

        data = json.loads(path.read_text())
        assert data['updated_at']
        first = data['standings'][0]
        assert first['rank'] == 1
        assert first['team_name'] == 'Paul Johnson'
        assert first['record'] == '1-0'
        assert first['weekly_results'][:2] == ['W', '']

    def test_save_week_results(self, tmp_path, scored):
        """Test week results JSON carries scores, winner and pending franchises."""
        _, week_scores = scored
        path = tmp_path / 'week_1.json'
        save_week_results(path, 1, week_scores)

        data = json.loads(path.read_text())
        assert data['week'] == 1
        first = data['matchups'][0]
        assert first['team1']['name'] == 'Paul Johnson'
        assert first['team1']['score'] == 59
        assert first['winner'] == 'Paul Johnson'
        assert first['team1']['franchises'][1]['breakdown']['events'] == 35

    def test_excel_export(self, tmp_path, scored):
        """Test the workbook has standings and weekly result sheets."""
        records, _ = scored
        path = tmp_path / 'standings.xlsx'
        export_standings_workbook(path, records, range(1, 19))

        wb = openpyxl.load_workbook(path)
        ws = wb['Standings']
        assert ws.cell(row=1, column=2).value == 'Team'
        assert ws.cell(row=2, column=2).value == 'Paul Johnson'
        assert ws.cell(row=2, column=3).value == '1-0'
        assert ws.cell(row=2, column=7).value == 59

        weekly = wb['Weekly Results']
        assert weekly.cell(row=1, column=2).value == 'Week 1'
        assert weekly.cell(row=2, column=2).value == 'W'
        assert weekly.cell(row=2, column=3).value is None
        wb.close()

    def test_excel_export_overwrites(self, tmp_path, scored):
        """Test exporting twice replaces the sheets instead of appending."""
        records, _ = scored
        path = tmp_path / 'standings.xlsx'
        export_standings_workbook(path, records, range(1, 19))
        export_standings_workbook(path, records[:1], range(1, 19))

        wb = openpyxl.load_workbook(path)
        assert wb.sheetnames == ['Standings', 'Weekly Results']
        assert wb['Standings'].max_row == 2
        wb.close()


class TestAutoscorerCLI:
    """Tests for the autoscorer command line."""

    def test_standings_run(self, temp_data_dir, capsys):
        """Test a plain run prints and writes standings."""
        autoscorer.main(['--data-dir', str(temp_data_dir)])

        out = capsys.readouterr().out
        assert 'STANDINGS' in out
        assert 'Paul Johnson' in out
        assert (temp_data_dir / 'output' / '2025' / 'standings.json').exists()

    def test_week_run(self, temp_data_dir, capsys):
        """Test --week prints matchup breakdowns and writes the week file."""
        autoscorer.main(['--data-dir', str(temp_data_dir), '--week', '1'])

        out = capsys.readouterr().out
        assert 'Paul Johnson 59 - 0 Max Athorn' in out
        assert (temp_data_dir / 'output' / '2025' / 'weeks' / 'week_1.json').exists()

    def test_import_stats(self, temp_data_dir, tmp_path, capsys):
        """Test importing a stats file replaces the week and advances the current week."""
        stats_path = tmp_path / 'import.json'
        write_json(stats_path, {'week': 1, 'stats': [{'franchise': 'Miami', 'benching': 1}]})

        autoscorer.main(['--data-dir', str(temp_data_dir), '--import-stats', str(stats_path)])

        out = capsys.readouterr().out
        assert 'Replaced 1 stat lines for week 1' in out
        assert 'Current week advanced to 2' in out
        config = json.loads((temp_data_dir / 'league_config.json').read_text())
        assert config['current_week'] == 2
        stats = json.loads((temp_data_dir / 'stats' / 'week_1.json').read_text())
        assert [s['franchise'] for s in stats['stats']] == ['Miami']

    def test_import_week_mismatch(self, temp_data_dir, tmp_path, capsys):
        """Test --week must match the imported file."""
        stats_path = tmp_path / 'import.json'
        write_json(stats_path, {'week': 1, 'stats': [{'franchise': 'Miami'}]})

        with pytest.raises(SystemExit) as exc_info:
            autoscorer.main(
                ['--data-dir', str(temp_data_dir), '--import-stats', str(stats_path), '--week', '2']
            )
        assert exc_info.value.code == 1
        assert 'holds week 1, not week 2' in capsys.readouterr().out

    def test_fetch_nfl(self, temp_data_dir, capsys):
        """Test --fetch-nfl imports the fetched rows."""
        rows = [RawWeeklyStats('Miami', 2, pass_yards=80)]
        with patch('autoscorer.fetch_nfl_rows', return_value=rows) as mock_fetch:
            autoscorer.main(['--data-dir', str(temp_data_dir), '--fetch-nfl', '--week', '2'])

        mock_fetch.assert_called_once_with(2025, 2, None)
        assert 'Imported 1 stat lines for week 2' in capsys.readouterr().out
        assert (temp_data_dir / 'stats' / 'week_2.json').exists()

    def test_fetch_nfl_with_events(self, temp_data_dir, tmp_path, capsys):
        """Test --events counters reach the saved week of fetched stats."""
        pl = pytest.importorskip('polars')
        pytest.importorskip('nflreadpy')

        player_stats = pl.DataFrame(
            [
                {
                    'position': 'QB', 'team': team, 'week': 2,
                    'completions': 12, 'attempts': 25, 'passing_yards': 110,
                    'passing_tds': 0, 'passing_interceptions': 2,
                    'sack_fumbles': 0, 'rushing_fumbles': 0, 'rushing_yards': 4,
                }
                for team in ('MIA', 'CLE')
            ]
        )
        events_path = tmp_path / 'week2_events.json'
        write_json(
            events_path,
            {'week': 2, 'events': {'MIA': {'benching': 1, 'longest_completion': 19}}},
        )

        with patch('badqb.data_fetcher.nfl.load_player_stats', return_value=player_stats):
            autoscorer.main(
                [
                    '--data-dir', str(temp_data_dir), '--quiet',
                    '--fetch-nfl', '--week', '2', '--events', str(events_path),
                ]
            )

        assert 'Imported 2 stat lines for week 2' in capsys.readouterr().out
        saved = json.loads((temp_data_dir / 'stats' / 'week_2.json').read_text())
        lines = {line['franchise']: line for line in saved['stats']}
        assert lines['Miami']['benching'] == 1
        assert lines['Miami']['longest_completion'] == 19
        assert lines['Cleveland']['benching'] == 0
        assert lines['Cleveland']['longest_completion'] is None

    def test_events_week_mismatch(self, temp_data_dir, tmp_path, capsys):
        """Test an events file for another week is refused."""
        events_path = tmp_path / 'events.json'
        write_json(events_path, {'week': 3, 'events': {'Miami': {'benching': 1}}})

        with patch('autoscorer.fetch_nfl_rows') as mock_fetch:
            with pytest.raises(SystemExit) as exc_info:
                autoscorer.main(
                    [
                        '--data-dir', str(temp_data_dir),
                        '--fetch-nfl', '--week', '2', '--events', str(events_path),
                    ]
                )
        assert exc_info.value.code == 1
        assert 'holds week 3, not week 2' in capsys.readouterr().out
        mock_fetch.assert_not_called()

    def test_events_requires_fetch_nfl(self, temp_data_dir, tmp_path):
        """Test --events is only accepted alongside --fetch-nfl."""
        with pytest.raises(SystemExit) as exc_info:
            autoscorer.main(['--data-dir', str(temp_data_dir), '--events', str(tmp_path / 'e.json')])
        assert exc_info.value.code == 2

    def test_week_run_lists_uncounted_matchups(self, temp_data_dir, capsys):
        """Test a week without lineups lists its matchups as not counted."""
        autoscorer.main(['--data-dir', str(temp_data_dir), '--week', '2'])

        out = capsys.readouterr().out
        assert 'No counted matchups yet' in out
        assert 'Paul Johnson vs Jacob Frush (not counted yet)' in out
        data = json.loads(
            (temp_data_dir / 'output' / '2025' / 'weeks' / 'week_2.json').read_text()
        )
        assert data['matchups'] == []

    def test_lineup_file_week_mismatch_exits(self, temp_data_dir, capsys):
        """Test a mis-named lineup file stops the run."""
        write_json(
            temp_data_dir / 'lineups' / 'week_2.json',
            {'week': 1, 'lineups': {'Paul Johnson': {'franchises': ['Houston', 'Buffalo']}}},
        )
        with pytest.raises(SystemExit) as exc_info:
            autoscorer.main(['--data-dir', str(temp_data_dir)])
        assert exc_info.value.code == 1
        assert "doesn't match file name" in capsys.readouterr().out

    def test_validation_errors_exit(self, temp_data_dir, capsys):
        """Test invalid league data exits non-zero."""
        write_json(
            temp_data_dir / 'lineups' / 'week_2.json',
            {'week': 2, 'lineups': {'Ghost': {'franchises': ['Cleveland', 'Miami']}}},
        )
        with pytest.raises(SystemExit) as exc_info:
            autoscorer.main(['--data-dir', str(temp_data_dir)])
        assert exc_info.value.code == 1
        assert 'Lineup for unknown team: Ghost' in capsys.readouterr().out

    def test_excel_option(self, temp_data_dir, tmp_path):
        """Test --excel writes a workbook."""
        excel_path = tmp_path / 'standings.xlsx'
        autoscorer.main(['--data-dir', str(temp_data_dir), '--quiet', '--excel', str(excel_path)])
        assert excel_path.exists()
