"""Resolved payloads for every catalog entry, keyed by catalog id."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from lsprotocol.types import InsertTextFormat

from uselsp.completion.catalog import CompletionCategory


class InsertFormat(Enum):
    PLAIN_TEXT = "plaintext"
    SNIPPET = "snippet"

    def to_lsp(self) -> InsertTextFormat:
        if self is InsertFormat.SNIPPET:
            return InsertTextFormat.Snippet
        return InsertTextFormat.PlainText


@dataclass(frozen=True)
class CompletionResolution:
    label: str
    insert_text: str
    documentation: str
    insert_format: InsertFormat = InsertFormat.SNIPPET
    sort_text: str | None = None
    # None keeps the category of the listed entry.
    category: CompletionCategory | None = CompletionCategory.FUNCTION


def _snippet(label: str, insert_text: str, documentation: str) -> CompletionResolution:
    return CompletionResolution(
        label=label,
        insert_text=insert_text,
        documentation=documentation,
        category=CompletionCategory.SNIPPET,
    )


def _function(
    label: str,
    insert_text: str,
    documentation: str,
    sort_text: str | None = None,
) -> CompletionResolution:
    return CompletionResolution(
        label=label,
        insert_text=insert_text,
        documentation=documentation,
        sort_text=sort_text,
    )


def _statement(
    label: str,
    insert_text: str,
    documentation: str,
    sort_text: str | None = None,
) -> CompletionResolution:
    return CompletionResolution(
        label=label,
        insert_text=insert_text,
        documentation=documentation,
        sort_text=sort_text,
        category=None,
    )


_URI_ENCODE_DOC = (
    "Encodes the contents of a variable such that it does not contain any "
    "illegal or ambiguous characters when used in an HTTP request."
)
_MATCH_FAILED_DOC = (
    "If pattern cannot be found in the string, or either string or pattern are "
    "empty, result of the function is empty string."
)

_RESOLUTIONS: dict[int, CompletionResolution] = {
    0: _snippet(
        "ifelse (example)",
        "\n".join(["if (${1:condition}) {", "\t$0", "} else {", "\t", "}"]),
        "If-Else Statement",
    ),
    1: _snippet(
        "foreach (example)",
        "\n".join(
            [
                "foreach \\$JSON{${1:RESPONSE}}.[KEY] as record {",
                "\tcsv write_fields my_csv \\$JSON(record).[my_key]",
                "}",
            ]
        ),
        "Example for looping over a JSON response payload",
    ),
    2: _function(
        "MAX",
        "@MAX(${1:<number>}, ${2:<number>} ${3:[, <number> ...]})",
        "Returns the largest number from the specified list (requires at least 2 arguments).",
    ),
    3: _function(
        "MIN",
        "@MIN(${1:<number>}, ${2:<number>} ${3:[, <number> ...]})",
        "Returns the smallest number from the specified list (requires at least 2 arguments).",
    ),
    4: _function(
        "ROUND",
        "@ROUND(${1:<number>} ${2:[, <digits>]})",
        "Returns number rounded to digits decimal places. If the digits argument "
        "is not specified then the function will round to the nearest integer.",
    ),
    5: _function(
        "CONCAT",
        "@CONCAT(${1:<string1>}, ${2:<string2>} ${3:[, <stringN> ...]})",
        "Treats all its arguments as strings, concatenates them, and returns the result.",
    ),
    6: _function(
        "SUBSTR",
        "@SUBSTR(${1:<string>}, ${2:<start>} ${3:[, <length>]})",
        "Returns a sub-string of string, starting from the character at position "
        "start and continuing until the end of the string end until the character "
        "at position length, whichever is shorter.",
    ),
    7: _function(
        "STRLEN",
        "@STRLEN(${1:<string>})",
        "Returns the length of its argument in bytes.",
    ),
    8: _function(
        "CURDATE",
        "@CURDATE()",
        "Returns the current (actual) date in the timezone of the Exivity server. "
        "The format may be any valid combination of strftime specifiers. The "
        "default format is %Y%m%d which returns a date in yyyyMMdd format",
    ),
    9: _function(
        "DATEADD",
        "@DATEADD(${1:<date>}, ${2:<days>})",
        "Adds a specified number of days to the given date, returning the result "
        "as a *yyyyMMdd* date.",
    ),
    10: _function(
        "DATEDIFF",
        "@DATEDIFF(${1:<date1>}, ${2:<date2>})",
        "Returns the difference in days between two yyyyMMdd dates. A positive "
        "result means that date1 is later than date2. A negative result means "
        "that date2 is later than date1. A result of 0 means that the two dates "
        "are the same.",
    ),
    11: _function(
        "DTADD",
        "@DTADD(${1:<datetime>}, ${2:<count>} ${3:[, <units>]})",
        "Adds count number of unit_s (DAYS by default) to the specified datetime "
        "value and return normalised result datetime value in YYYYMMDDhhmmss_ format.",
    ),
    12: _function(
        "PAD",
        "@PAD(${1:<width>}, ${2:<value>} ${3:[, <pad_char>]})",
        "Returns value, left-padded with pad_char (0 by default) up to specified "
        "width. If width is less than or equal to the width of value, no padding occurs.",
    ),
    13: _function(
        "EXTRACT_BEFORE",
        "@EXTRACT_BEFORE(${1:<string>}, ${2:<pattern>})",
        f"Returns the substring of string that precedes the pattern. {_MATCH_FAILED_DOC}",
    ),
    14: _function(
        "EXTRACT_AFTER",
        "@EXTRACT_AFTER(${1:<string>}, ${2:<pattern>})",
        f"Returns the substring of string that follows the pattern. {_MATCH_FAILED_DOC}",
    ),
    15: _function(
        "aws_sign_string",
        "aws_sign_string ${1:<varName>} using ${2:<secret_key>} ${3:<date>} "
        "${4:<region>} ${5:<service>}",
        "Generates an AWS4-HMAC-SHA256 signature, used as the signature component "
        "of the Authorization HTTP header when calling the AWS API.",
    ),
    16: _function(
        "basename",
        "basename ${1:<var_name>}",
        "Extracts the filename portion of a path + filename string.",
    ),
    17: _function(
        "basename as",
        "basename ${1:<string>} as ${2:<var_name>}",
        "Extracts the filename portion of a path + filename string into a separate variable.",
        sort_text="basename",
    ),
    18: _function(
        "clear http_headers",
        "clear http_headers",
        "Deletes all HTTP headers previously configured using the set http_header statement",
        sort_text="clear",
    ),
    19: _function(
        "discard",
        "discard {${1:<buffer_name>}}",
        "Deletes a named buffer.",
    ),
    20: _function(
        "encode base16",
        "encode base16 ${1:<var_or_buffer>}",
        "Base16 encodes the contents of a variable or a named buffer.",
        sort_text="encode",
    ),
    21: _function(
        "encode base64",
        "encode base64 ${1:<var_or_buffer>}",
        "Base64 encodes the contents of a variable or a named buffer.",
        sort_text="encode",
    ),
    22: _function(
        "encrypt",
        "encrypt var ${1:<var_name>} = ${2:<value>}",
        "Conceals the value of a variable, such that it does not appear in plain "
        "text in a USE script.",
    ),
    23: _function(
        "environment",
        "environment ${1:<name>}",
        "Specifies the name of the environment to use for resolving global variables.",
    ),
    24: _function(
        "escape",
        "escape quotes in ${1:<var_or_buffer>} ${2:[using <escape_char>]}",
        "Escapes quotes in a variable value or the contents of a named buffer.",
    ),
    25: _function(
        "exit_loop",
        "exit_loop",
        "Terminates the current loop.",
    ),
    26: _function(
        "generate_jwt",
        "generate_jwt key ${1:<key>} ${2:<component>} ${3:[... <component>]} "
        "as ${4:<var_name>}",
        "Generates an RFC 7515-compliant JWT (JSON Web Token) which can be used, "
        "for example, for Google Cloud OAuth 2.0 Server to Server Authentication.",
    ),
    27: _function(
        "get_last_day_of",
        "get_last_day_of ${1:<yyyyMM>} as ${2:<var_name>}",
        "Sets a variable to contain the number of days in the specified month.",
    ),
    28: _function(
        "gunzip file",
        "gunzip ${1:<filename>} as ${2:<filename>}",
        "Inflates a GZIP file.",
        sort_text="gunzip",
    ),
    29: _function(
        "gunzip buffer",
        "gunzip {${1:<buffer_name>}} as ${2:<filename>}",
        "Inflates a GZIP buffer.",
        sort_text="gunzip",
    ),
    30: _function(
        "hash sha256",
        "hash sha256 ${1:[HMAC [b16|b64] <key>]} ${2:<var_or_buffer>} "
        "as ${3:<var_name>} ${4:[b16|b64]}",
        "Generates a base-16 or base-64 encoded SHA256 hash of data stored in a "
        "variable or named buffer.",
        sort_text="hash",
    ),
    31: _function(
        "hash md5",
        "hash md5 ${1:<var_or_buffer>} as ${2:<var_name>} ${3:[b16|b64]}",
        "Generates a base-16 or base-64 encoded MD5 hash of data stored in a "
        "variable or named buffer.",
        sort_text="hash",
    ),
    32: _function(
        "http",
        "http ${1:<method>} ${2:<url>}",
        "Initiates an HTTP session using any settings previously configured using "
        "the set statement.",
        sort_text="http",
    ),
    33: _function(
        "http dump_headers",
        "http dump_headers",
        "Dumps a list of all the response headers returned by the server in the "
        "most recent session.",
        sort_text="http",
    ),
    34: _function(
        "http get_header",
        "http get_header ${1:<header_name>} as ${2:<var_name>}",
        "Retrieves the value of a specific header.",
        sort_text="http",
    ),
    35: _function(
        "json",
        "json format {${1:<buffer_name>}}",
        "Formats JSON in a named buffer.",
    ),
    36: _function(
        "loglevel",
        "loglevel ${1:<level>}",
        "Determines the amount of detail recorded in the USE script logfile.",
    ),
    37: _function(
        "pause",
        "pause ${1:<delaytime>}",
        "Suspends execution of a USE script for a specified time.",
    ),
    38: _function(
        "print",
        "print ${1:[-n]} ${2:<text_or_buffer>}",
        "Display text to standard output while a USE script is executing.",
    ),
    39: _function(
        "save",
        "save {${1:<buffer_name>}} as ${2:<file_name>}",
        "Writes the contents of a named buffer to disk.",
    ),
    40: _function(
        "set",
        "set ${1:<setting>} ${2:<value>}",
        "Configures a setting for use by subsequent http or buffer statements.",
    ),
    41: _function(
        "terminate",
        "terminate",
        "Exits the USE script immediately.",
        sort_text="terminate",
    ),
    42: _function(
        "terminate with error",
        "terminate with error",
        "Exits the USE script immediately, logging an error.",
        sort_text="terminate",
    ),
    43: _function(
        "unzip",
        "unzip {${1:<buffer_name>}}",
        "Unzips the data in a named buffer.",
    ),
    44: _function(
        "uri encode",
        "uri encode ${1:<var_name>}",
        _URI_ENCODE_DOC,
        sort_text="uri",
    ),
    45: _function(
        "uri component-encode",
        "uri component-encode ${1:<var_name>}",
        _URI_ENCODE_DOC,
        sort_text="uri",
    ),
    46: _function(
        "uri aws-object-encode",
        "uri aws-object-encode ${1:<var_name>}",
        _URI_ENCODE_DOC,
        sort_text="uri",
    ),
    47: _function(
        "buffer",
        "buffer ${1:<var_name>} = protocol ${2:[... <protocol_parameter(s)>]}",
        "Used to create and/or populate one of these named buffers with data.",
    ),
    48: _function(
        "csv",
        "csv ${1:<label_name>} = ${2:<file_name>}",
        "Used to create CSV files.",
    ),
    49: _function(
        "csv add_headers",
        "csv add_headers ${1:<label_name>} ${2:<header1>} ${3:<header2>} "
        "${4:[<headerN> ...]}",
        "Used to add headers to CSV files.",
        sort_text="csv",
    ),
    50: _function(
        "csv fix_headers",
        "csv fix_headers ${1:<label_name>}",
        "Used to permanently set the headers for CSV files so that data can be "
        "written to the file.",
        sort_text="csv",
    ),
    51: _function(
        "csv write_fields",
        "csv write_fields ${1:<label_name>} ${2:<value1>} ${3:<value2>} "
        "${4:[<valueN> ...]}",
        "Used to write data to CSV files.",
        sort_text="csv",
    ),
    52: _function(
        "csv close",
        "csv close ${1:<label_name>}",
        "Used to close CSV files.",
        sort_text="csv",
    ),
    53: _statement(
        "decimal_to_ipv4",
        "decimal_to_ipv4 ${1:<variable_name>}",
        "Converts a decimal value to an IPv4 address in conventional dotted-quad "
        "notation (such as 192.168.0.10).",
    ),
    54: _statement(
        "decimal_to_ipv4 as",
        "decimal_to_ipv4 ${1:<source_variable_name>} as ${2:<destination_variable_name>}",
        "Converts a decimal value to an IPv4 address in conventional dotted-quad "
        "notation (such as 192.168.0.10), placing the value in the destination variable.",
        sort_text="decimal_to_ipv4",
    ),
    55: _statement(
        "gosub",
        "gosub ${1:<subroutineName>} (${2:<argument1>}, ${3:<argument2>}, "
        "${4:[<argumentN> ...]})",
        "Used to run a named subroutine.",
    ),
    56: _statement(
        "ipv4_to_decimal",
        "ipv4_to_decimal ${1:<variable_name>}",
        "Converts an IPv4 address in conventional dotted-quad notation (such as "
        "192.168.0.10) to a decimal value.",
    ),
    57: _statement(
        "ipv4_to_decimal as",
        "ipv4_to_decimal ${1:<source_variable_name>} as ${2:<destination_variable_name>}",
        "Converts an IPv4 address in conventional dotted-quad notation (such as "
        "192.168.0.10) to a decimal value, placing the value in the destination variable.",
        sort_text="ipv4_to_decimal",
    ),
    58: _statement(
        "loop",
        "${1:<looplabel>} ${2:[count]} ${3:[timeout timelimit]} {\n\t# Statements\n}",
        "Executes one or more statements multiple times.",
    ),
    59: _statement(
        "lowercase",
        "lowercase ${1:<variable_name>|{<buffer_name>\\}}",
        "Sets all letters in a variable or named buffer to lower case.",
    ),
    60: _statement(
        "match",
        "match ${1:<label_name>} ${2:<expression>} ${3:<target>}",
        "Searches either a specified string or the contents of a named buffer "
        "using a regular expression.",
    ),
    61: _statement(
        "return",
        "return",
        "Exits a subroutine at an arbitrary point and returns to the calling location.",
    ),
    62: _statement(
        "subroutine",
        "subroutine ${1:<subroutine_name>} {\n\t# Statements\n}",
        "Defines a named subroutine.",
    ),
    63: _statement(
        "uppercase",
        "uppercase ${1:<variable_name>|{<buffer_name>\\}}",
        "Sets all letters in a variable or named buffer to upper case.",
    ),
}

RESOLUTIONS: Mapping[int, CompletionResolution] = MappingProxyType(_RESOLUTIONS)
