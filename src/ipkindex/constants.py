# ar container layout
AR_MAGIC = b"!<arch>\n"
AR_HEADER_SIZE = 60
AR_NAME_SIZE = 16
AR_SIZE_FIELD = slice(48, 58)
AR_HEADER_END = b"`\n"

# metadata member and the paths the control file may live at inside it, in lookup order
CONTROL_MEMBER = "control.tar.gz"
CONTROL_PATHS = ("CONTROL/control", "control")

REQUIRED_FIELDS = ("Package", "Version", "Architecture")

# version strings are reduced to digits and left-padded to this width before comparing
VERSION_PAD_WIDTH = 8

PACKAGES_FILENAME = "Packages"
PACKAGES_GZ_FILENAME = "Packages.gz"
PACKAGES_HTML_FILENAME = "Packages.html"
LISTING_FILENAME = "index.html"

# zlib's default level
GZIP_LEVEL = 6

DEFAULT_GITHUB_USER = "likDanil"
DEFAULT_GITHUB_REPO = "release"
DEFAULT_ROOT_DIRS = ("keenetic",)
DEFAULT_MAINTAINER = "Domain Server Team"
DEFAULT_SECTION = "base"
DEFAULT_PRIORITY = "optional"
DEFAULT_EXTENSIONS = (".ipk",)
