"""
Reference Dataset

Curated table of real U.S. four-year institutions with trusted enrollment,
admit rate, testing policy and state. Used both as fallback candidates and as
ground truth for metadata correction. Tiers are never stored here; they are
computed per student.
"""

from functools import lru_cache
from typing import Dict, Iterable, Optional, Tuple

from .contracts import ReferenceInstitution
from .normalizer import normalize_identity


REFERENCE_DATASET_VERSION = "2025.1"

# Compact raw format: (name, url, state, enrollment, admit rate, testing policy)
RAW = [
    # Northeast
    ("Amherst College", "amherst.edu", "MA", 1900, 0.09, "optional"),
    ("Bates College", "bates.edu", "ME", 1800, 0.14, "optional"),
    ("Bowdoin College", "bowdoin.edu", "ME", 1900, 0.09, "optional"),
    ("Hampshire College", "hampshire.edu", "MA", 1300, 0.80, "optional"),
    ("Bennington College", "bennington.edu", "VT", 800, 0.58, "optional"),
    ("Sarah Lawrence College", "sarahlawrence.edu", "NY", 1400, 0.55, "optional"),
    ("College of the Holy Cross", "holycross.edu", "MA", 3100, 0.32, "optional"),
    ("Providence College", "providence.edu", "RI", 4900, 0.55, "optional"),
    ("Tufts University", "tufts.edu", "MA", 6700, 0.10, "optional"),
    ("Boston College", "bc.edu", "MA", 10000, 0.16, "optional"),
    ("Northeastern University", "northeastern.edu", "MA", 14000, 0.07, "optional"),
    ("Yale University", "yale.edu", "CT", 6500, 0.05, "required"),
    ("Brown University", "brown.edu", "RI", 7200, 0.05, "required"),
    ("Dartmouth College", "dartmouth.edu", "NH", 4500, 0.06, "required"),
    ("Massachusetts Institute of Technology", "mit.edu", "MA", 4600, 0.04, "required"),
    ("Quinnipiac University", "quinnipiac.edu", "CT", 7200, 0.72, "optional"),
    ("Marist College", "marist.edu", "NY", 5500, 0.68, "optional"),
    ("Suffolk University", "suffolk.edu", "MA", 5500, 0.85, "optional"),
    ("Harvard University", "harvard.edu", "MA", 21000, 0.03, "required"),
    ("Columbia University", "columbia.edu", "NY", 23000, 0.04, "optional"),
    ("Cornell University", "cornell.edu", "NY", 15000, 0.09, "required"),
    ("New York University", "nyu.edu", "NY", 28000, 0.13, "optional"),
    ("Boston University", "bu.edu", "MA", 18000, 0.14, "optional"),
    ("University of Connecticut", "uconn.edu", "CT", 19000, 0.56, "optional"),
    ("University of New Hampshire", "unh.edu", "NH", 15000, 0.78, "optional"),
    ("University of Vermont", "uvm.edu", "VT", 12000, 0.58, "optional"),
    ("Stony Brook University", "stonybrook.edu", "NY", 18000, 0.49, "optional"),
    ("University at Buffalo", "buffalo.edu", "NY", 22000, 0.60, "optional"),
    ("Binghamton University", "binghamton.edu", "NY", 15000, 0.38, "optional"),
    ("University of Massachusetts Amherst", "umass.edu", "MA", 30000, 0.58, "optional"),

    # Mid-Atlantic
    ("Swarthmore College", "swarthmore.edu", "PA", 1600, 0.07, "optional"),
    ("Haverford College", "haverford.edu", "PA", 1400, 0.13, "optional"),
    ("Dickinson College", "dickinson.edu", "PA", 1900, 0.39, "optional"),
    ("Allegheny College", "allegheny.edu", "PA", 1600, 0.74, "optional"),
    ("Ursinus College", "ursinus.edu", "PA", 1200, 0.78, "optional"),
    ("Goucher College", "goucher.edu", "MD", 1100, 0.80, "optional"),
    ("Bucknell University", "bucknell.edu", "PA", 3800, 0.32, "optional"),
    ("Lafayette College", "lafayette.edu", "PA", 2700, 0.38, "optional"),
    ("Susquehanna University", "susqu.edu", "PA", 2100, 0.72, "optional"),
    ("Christopher Newport University", "cnu.edu", "VA", 4500, 0.73, "optional"),
    ("Carnegie Mellon University", "cmu.edu", "PA", 7400, 0.12, "required"),
    ("Villanova University", "villanova.edu", "PA", 7000, 0.23, "optional"),
    ("Lehigh University", "lehigh.edu", "PA", 5600, 0.32, "optional"),
    ("Georgetown University", "georgetown.edu", "DC", 7800, 0.13, "required"),
    ("Princeton University", "princeton.edu", "NJ", 5600, 0.04, "optional"),
    ("American University", "american.edu", "DC", 8500, 0.44, "optional"),
    ("Seton Hall University", "shu.edu", "NJ", 6200, 0.60, "optional"),
    ("Drexel University", "drexel.edu", "PA", 13500, 0.78, "optional"),
    ("University of Pennsylvania", "upenn.edu", "PA", 22000, 0.06, "required"),
    ("Johns Hopkins University", "jhu.edu", "MD", 17000, 0.08, "required"),
    ("University of Virginia", "virginia.edu", "VA", 17500, 0.19, "optional"),
    ("George Washington University", "gwu.edu", "DC", 15000, 0.44, "optional"),
    ("University of Pittsburgh", "pitt.edu", "PA", 20000, 0.42, "optional"),
    ("University of Delaware", "udel.edu", "DE", 19000, 0.60, "optional"),
    ("James Madison University", "jmu.edu", "VA", 22000, 0.76, "optional"),
    ("West Virginia University", "wvu.edu", "WV", 22000, 0.85, "optional"),
    ("Towson University", "towson.edu", "MD", 19000, 0.78, "optional"),
    ("Penn State University", "psu.edu", "PA", 46000, 0.55, "optional"),
    ("Temple University", "temple.edu", "PA", 30000, 0.80, "optional"),
    ("Rutgers University", "rutgers.edu", "NJ", 50000, 0.61, "optional"),
    ("Virginia Commonwealth University", "vcu.edu", "VA", 31000, 0.88, "optional"),

    # South
    ("Furman University", "furman.edu", "SC", 2800, 0.62, "optional"),
    ("Rhodes College", "rhodes.edu", "TN", 2000, 0.52, "optional"),
    ("College of Charleston", "cofc.edu", "SC", 4800, 0.75, "optional"),
    ("Samford University", "samford.edu", "AL", 3600, 0.82, "optional"),
    ("Mercer University", "mercer.edu", "GA", 3500, 0.78, "optional"),
    ("Vanderbilt University", "vanderbilt.edu", "TN", 7100, 0.06, "optional"),
    ("Rice University", "rice.edu", "TX", 4500, 0.09, "optional"),
    ("Emory University", "emory.edu", "GA", 7100, 0.13, "optional"),
    ("Wake Forest University", "wfu.edu", "NC", 5500, 0.22, "optional"),
    ("Tulane University", "tulane.edu", "LA", 8500, 0.15, "optional"),
    ("Southern Methodist University", "smu.edu", "TX", 7100, 0.53, "optional"),
    ("Belmont University", "belmont.edu", "TN", 7000, 0.80, "optional"),
    ("Elon University", "elon.edu", "NC", 7000, 0.72, "optional"),
    ("Duke University", "duke.edu", "NC", 16000, 0.07, "optional"),
    ("University of Miami", "miami.edu", "FL", 19000, 0.19, "optional"),
    ("Clemson University", "clemson.edu", "SC", 22000, 0.38, "optional"),
    ("University of Alabama", "ua.edu", "AL", 29000, 0.74, "optional"),
    ("University of Mississippi", "olemiss.edu", "MS", 18000, 0.88, "optional"),
    ("Appalachian State University", "appstate.edu", "NC", 19000, 0.72, "optional"),
    ("Baylor University", "baylor.edu", "TX", 15000, 0.52, "optional"),
    ("University of Arkansas", "uark.edu", "AR", 23000, 0.80, "optional"),
    ("University of Texas at Austin", "utexas.edu", "TX", 51000, 0.31, "required"),
    ("Texas A&M University", "tamu.edu", "TX", 65000, 0.63, "optional"),
    ("University of Florida", "ufl.edu", "FL", 52000, 0.25, "required"),
    ("Florida State University", "fsu.edu", "FL", 42000, 0.25, "required"),
    ("University of Georgia", "uga.edu", "GA", 40000, 0.43, "required"),
    ("Georgia Institute of Technology", "gatech.edu", "GA", 40000, 0.17, "required"),
    ("University of North Carolina at Chapel Hill", "unc.edu", "NC", 30000, 0.19, "optional"),
    ("University of Central Florida", "ucf.edu", "FL", 58000, 0.42, "optional"),
    ("University of Tennessee", "utk.edu", "TN", 30000, 0.83, "required"),
    ("Auburn University", "auburn.edu", "AL", 31000, 0.82, "required"),
    ("Texas State University", "txstate.edu", "TX", 35000, 0.84, "optional"),

    # Midwest
    ("Grinnell College", "grinnell.edu", "IA", 1700, 0.11, "optional"),
    ("Kenyon College", "kenyon.edu", "OH", 1800, 0.29, "optional"),
    ("Knox College", "knox.edu", "IL", 1100, 0.75, "optional"),
    ("Beloit College", "beloit.edu", "WI", 1000, 0.62, "optional"),
    ("College of Wooster", "wooster.edu", "OH", 2000, 0.60, "optional"),
    ("Hope College", "hope.edu", "MI", 3000, 0.78, "optional"),
    ("Luther College", "luther.edu", "IA", 2000, 0.78, "optional"),
    ("University of Notre Dame", "nd.edu", "IN", 9000, 0.13, "optional"),
    ("Washington University in St. Louis", "wustl.edu", "MO", 8000, 0.12, "optional"),
    ("University of Chicago", "uchicago.edu", "IL", 7500, 0.05, "optional"),
    ("Marquette University", "marquette.edu", "WI", 8200, 0.82, "optional"),
    ("Butler University", "butler.edu", "IN", 5000, 0.65, "optional"),
    ("University of Dayton", "udayton.edu", "OH", 8500, 0.68, "optional"),
    ("Creighton University", "creighton.edu", "NE", 4500, 0.65, "optional"),
    ("DePaul University", "depaul.edu", "IL", 13000, 0.70, "optional"),
    ("Drake University", "drake.edu", "IA", 5000, 0.68, "optional"),
    ("Northwestern University", "northwestern.edu", "IL", 22000, 0.07, "optional"),
    ("Miami University", "miamioh.edu", "OH", 17000, 0.65, "optional"),
    ("Ohio State University", "osu.edu", "OH", 60000, 0.53, "required"),
    ("University of Michigan", "umich.edu", "MI", 46000, 0.18, "optional"),
    ("University of Wisconsin Madison", "wisc.edu", "WI", 44000, 0.43, "optional"),
    ("University of Illinois Urbana-Champaign", "illinois.edu", "IL", 52000, 0.44, "optional"),
    ("Purdue University", "purdue.edu", "IN", 50000, 0.53, "required"),
    ("Indiana University Bloomington", "iu.edu", "IN", 45000, 0.80, "optional"),
    ("Michigan State University", "msu.edu", "MI", 49000, 0.83, "optional"),
    ("University of Minnesota", "umn.edu", "MN", 51000, 0.75, "optional"),
    ("Iowa State University", "iastate.edu", "IA", 32000, 0.90, "optional"),
    ("Kansas State University", "k-state.edu", "KS", 21000, 0.92, "optional"),
    ("University of Missouri", "missouri.edu", "MO", 30000, 0.78, "optional"),

    # West
    ("Pomona College", "pomona.edu", "CA", 1700, 0.07, "optional"),
    ("Harvey Mudd College", "hmc.edu", "CA", 900, 0.13, "optional"),
    ("Reed College", "reed.edu", "OR", 1500, 0.36, "optional"),
    ("Whitman College", "whitman.edu", "WA", 1500, 0.56, "optional"),
    ("Occidental College", "oxy.edu", "CA", 2000, 0.37, "optional"),
    ("Colorado College", "coloradocollege.edu", "CO", 2200, 0.13, "optional"),
    ("Whitworth University", "whitworth.edu", "WA", 2300, 0.80, "optional"),
    ("University of Redlands", "redlands.edu", "CA", 2800, 0.72, "optional"),
    ("Gonzaga University", "gonzaga.edu", "WA", 4900, 0.62, "optional"),
    ("Stanford University", "stanford.edu", "CA", 8100, 0.04, "required"),
    ("California Institute of Technology", "caltech.edu", "CA", 1000, 0.03, "required"),
    ("Santa Clara University", "scu.edu", "CA", 6200, 0.49, "optional"),
    ("Pepperdine University", "pepperdine.edu", "CA", 5500, 0.37, "optional"),
    ("University of San Diego", "sandiego.edu", "CA", 6200, 0.48, "optional"),
    ("University of Denver", "du.edu", "CO", 6000, 0.63, "optional"),
    ("University of Portland", "up.edu", "OR", 4200, 0.72, "optional"),
    ("Seattle University", "seattleu.edu", "WA", 4500, 0.78, "optional"),
    ("University of Southern California", "usc.edu", "CA", 21000, 0.10, "optional"),
    ("University of Washington", "uw.edu", "WA", 28000, 0.48, "optional"),
    ("University of California Santa Barbara", "ucsb.edu", "CA", 23000, 0.26, "blind"),
    ("University of Colorado Boulder", "colorado.edu", "CO", 29000, 0.81, "optional"),
    ("Washington State University", "wsu.edu", "WA", 25000, 0.83, "optional"),
    ("University of Nevada Reno", "unr.edu", "NV", 18000, 0.85, "optional"),
    ("Boise State University", "boisestate.edu", "ID", 20000, 0.82, "optional"),
    ("Northern Arizona University", "nau.edu", "AZ", 22000, 0.85, "optional"),
    ("San Diego State University", "sdsu.edu", "CA", 29000, 0.38, "optional"),
    ("University of California Berkeley", "berkeley.edu", "CA", 42000, 0.12, "blind"),
    ("University of California Los Angeles", "ucla.edu", "CA", 45000, 0.09, "blind"),
    ("University of California San Diego", "ucsd.edu", "CA", 40000, 0.24, "blind"),
    ("University of California Davis", "ucdavis.edu", "CA", 38000, 0.37, "blind"),
    ("Arizona State University", "asu.edu", "AZ", 65000, 0.88, "optional"),
    ("University of Arizona", "arizona.edu", "AZ", 46000, 0.86, "optional"),
    ("Oregon State University", "oregonstate.edu", "OR", 32000, 0.79, "optional"),
    ("Colorado State University", "colostate.edu", "CO", 34000, 0.84, "optional"),
    ("University of Utah", "utah.edu", "UT", 33000, 0.82, "optional"),
]


def _to_institution(row: Tuple) -> ReferenceInstitution:
    name, url, state, enrollment, admit_rate, policy = row
    return ReferenceInstitution(
        name=name,
        url=url if url.startswith("https://") else f"https://www.{url}",
        state=state,
        enrollment=enrollment,
        admit_rate=admit_rate,
        testing_policy=policy,
    )


@lru_cache(maxsize=1)
def load_reference_dataset() -> Tuple[ReferenceInstitution, ...]:
    """
    Load the bundled reference dataset once per process.
    Returned as a tuple so callers cannot mutate the shared copy.
    """
    return tuple(_to_institution(row) for row in RAW)


def build_reference_index(
    institutions: Iterable[ReferenceInstitution],
    aliases: Optional[Dict[str, str]] = None
) -> Dict[str, ReferenceInstitution]:
    """
    Index reference institutions by normalized key.
    The first entry wins when two names collide.
    """
    index: Dict[str, ReferenceInstitution] = {}
    for institution in institutions:
        key = normalize_identity(institution.name, aliases)
        index.setdefault(key, institution)
    return index
