"""
Shared fixtures: small crime and crowdfunding CSVs and the repository's
dataset profiles.
"""

import logging
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import pytest

from tabstats.models.parameters import load_profiles

CONFIG_PATH = Path(__file__).parent.parent / "config" / "datasets.yml"

# 2020-01-06 is a Monday, 2020-01-07 a Tuesday, 2021-03-01 a Monday,
# 2021-07-04 a Sunday.
CRIME_CSV = """\
Primary_Key,Occurred_On,Offense_Category,Offense,Neighborhood
1,01/06/2020,Assault Offenses,Aggravated Assault,Downtown
2,01/06/2020,ASSAULT OFFENSES,Simple Assault,Downtown
3,01/07/2020,Larceny/Theft Offenses,Shoplifting,Midtown
3,01/07/2020,Larceny/Theft Offenses,Shoplifting,Midtown
4,02/14/2020,NA,Unknown,Uptown
5,not a date,Robbery,Robbery,Downtown
6,03/01/2021,Robbery,Robbery,<Null>
7,12/31/2019,Robbery,Robbery,Downtown
8,07/04/2021,Homicide Offenses,Murder & Nonnegligent Manslaughter,Midtown
"""

CROWDFUNDING_CSV = """\
ID,name,category,main_category,currency,deadline,goal,launched,pledged,state,backers,country,usd_pledged_real
1,Widget,Gadgets,Technology,USD,09/10/2015,"1,000",08/11/2015 12:12,"$1,500.00",successful,15,US,1500
2,Film,Shorts,Film & Video,USD,10/01/2015,5000,09/01/2015 09:30,100,failed,2,US,100
3,Game,Tabletop,Games,USD,11/02/2016,2000,10/02/2016 10:00,50,canceled,1,US,50
4,Live one,Tabletop,Games,USD,01/02/2017,2000,12/02/2016 10:00,0,live,0,US,0
5,Bad goal,Tabletop,Games,USD,01/02/2017,abc,12/05/2016 10:00,10,successful,1,US,10
"""


@pytest.fixture(autouse=True)
def reset_package_logger():
    # The report command installs a RichHandler and a level on the package logger
    yield
    logger = logging.getLogger("tabstats")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture(scope="session")
def profiles():
    return load_profiles(CONFIG_PATH)


@pytest.fixture
def crime_profile(profiles):
    return profiles["crime"]


@pytest.fixture
def crowdfunding_profile(profiles):
    return profiles["crowdfunding"]


@pytest.fixture
def crime_csv(tmp_path) -> Path:
    path = tmp_path / "crime.csv"
    path.write_text(CRIME_CSV)
    return path


@pytest.fixture
def crowdfunding_csv(tmp_path) -> Path:
    path = tmp_path / "ks-projects.csv"
    path.write_text(CROWDFUNDING_CSV)
    return path
