"""CMS field-name aliases per entity type.

Each canonical field maps to the ordered list of CMS field names that have
carried it. Mappers read records only through this table, so a renamed CMS
column is handled by adding an alias here. Bump ``SCHEMA_VERSION`` whenever an
alias is removed or reordered.
"""

SCHEMA_VERSION = "2024.2"

# Names used on embedded reference objects, per referenced type.
REFERENCE_NAME_KEYS = {
    "hospital": ("hospitalName", "Hospital Name"),
    "city": ("cityName", "city name", "City Name", "name"),
    "state": ("state", "State Name", "State", "stateName", "StateName", "state_name", "displayName", "name", "title"),
    "country": ("countryName", "Country Name", "Country", "country", "name", "title"),
    "doctor": ("doctorName", "Doctor Name"),
    "specialty": ("specialty", "Specialty Name", "title", "name"),
    "specialization": ("specialization", "specialty", "Specialty Name", "title", "name"),
    "specialist": ("specialty", "Specialty Name", "title", "name"),
    "department": ("department", "Name", "name"),
    "treatment": ("treatmentName", "Treatment Name", "title", "name"),
    "accreditation": ("title", "Title"),
}

# Fields on a branch that point back at its hospital, highest precedence first.
HOSPITAL_ASSOCIATION_KEYS = (
    "hospital",
    "HospitalMaster_branches",
    "hospitalGroup",
    "Hospital Group Master",
)

FIELD_ALIASES = {
    "hospital": {
        "name": ("hospitalName", "Hospital Name"),
        "description": ("description", "Description"),
        "year_established": ("yearEstablished", "Year Established"),
        "hospital_image": ("hospitalImage", "Hospital Image"),
        "logo": ("logo", "Logo"),
        "specialty": ("specialty",),
        "show_hospital": ("showHospital", "ShowHospital"),
    },
    "branch": {
        "name": ("branchName", "Branch Name"),
        "address": ("address", "Address"),
        "city": ("city",),
        "specialty": ("specialty",),
        "accreditation": ("accreditation",),
        "description": ("description", "Description"),
        "total_beds": ("totalBeds", "Total Beds"),
        "no_of_doctors": ("noOfDoctors", "No of Doctors"),
        "year_established": ("yearEstablished", "Year Established"),
        "branch_image": ("branchImage", "Branch Image"),
        "logo": ("logo", "Logo", "branchLogo", "hospitalLogo"),
        "doctors": ("doctor",),
        "specialists": ("specialist",),
        "treatments": ("treatment",),
        "departments": ("department",),
        "popular": ("popular",),
        "show_hospital": ("showHospital", "ShowHospital"),
    },
    "doctor": {
        "name": ("doctorName", "Doctor Name"),
        "specialization": ("specialization",),
        "qualification": ("qualification", "Qualification"),
        "experience_years": ("experienceYears", "Experience (Years)"),
        "designation": ("designation", "Designation"),
        "about": ("aboutDoctor",),
        "profile_image": ("profileImage", "profile Image"),
        "popular": ("popular",),
    },
    "specialist": {
        "name": ("specialty", "Specialty Name", "title", "name"),
        "department": ("department",),
        "treatments": ("treatment",),
    },
    "department": {
        "name": ("department", "Name", "name"),
        "specialists": ("specialist", "specialists"),
    },
    "treatment": {
        "name": ("treatmentName", "Treatment Name", "title", "name"),
        "description": ("Description", "description"),
        "starting_cost": ("averageCost", "Starting Cost"),
        "treatment_image": ("treatmentImage", "treatment image"),
        "popular": ("popular",),
        "category": ("category", "Category"),
        "duration": ("duration", "Duration"),
        "cost": ("cost", "Cost", "averageCost"),
    },
    "accreditation": {
        "name": ("title", "Title"),
        "image": ("image", "Image"),
    },
    "city": {
        "name": ("cityName", "city name", "name", "City Name"),
        "state": ("state", "State", "stateRef", "state_master", "stateMaster", "StateMaster", "StateMaster_state"),
    },
    "state": {
        "name": REFERENCE_NAME_KEYS["state"],
        "country": ("country", "CountryMaster_state", "Country", "countryRef", "country_ref"),
    },
    "country": {
        "name": REFERENCE_NAME_KEYS["country"],
    },
}

UNKNOWN_NAMES = {
    "hospital": "Unknown Hospital",
    "branch": "Unknown Branch",
    "doctor": "Unknown Doctor",
    "specialist": "Unknown Specialist",
    "department": "Unknown Department",
    "treatment": "Unknown Treatment",
    "accreditation": "Unknown Accreditation",
    "city": "Unknown City",
    "state": "Unknown State",
    "country": "Unknown Country",
}


def aliases(entity_type: str, field: str) -> tuple:
    return FIELD_ALIASES[entity_type][field]
