#
# Licensed to the Apache Software Foundation (ASF) under one or more
# contributor license agreements.  See the NOTICE file distributed with
# this work for additional information regarding copyright ownership.
# The ASF licenses this file to You under the Apache License, Version 2.0
# (the "License"); you may not use this file except in compliance with
# the License.  You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Single-byte codes of the tagged stream format.

Codes 0x00-0x1f introduce a short UTF-8 string whose byte length is the code
itself; codes 0x80-0xbf are compact integers in [-16, 47].
"""

NULL = 0x4E  # 'N'
TRUE = 0x54  # 'T'
FALSE = 0x46  # 'F'
INT = 0x49  # 'I', 64-bit signed
BIGINT = 0x47  # 'G', u32 length + two's complement bytes
DOUBLE = 0x44  # 'D'
STRING = 0x53  # 'S', u32 length + utf-8
BYTES = 0x42  # 'B', u32 length + raw bytes
LIST = 0x56  # 'V'
END = 0x5A  # 'Z'
STRUCT = 0x4F  # 'O', tag string + u16 field count
STRUCT_CACHED = 0x51  # 'Q', u16 struct cache index + u16 field count
PUT_PRIORITY_CACHE = 0x43  # 'C'
GET_PRIORITY_CACHE = 0x52  # 'R', u32 priority cache index

SHORT_STRING_MAX = 0x1F

SMALL_INT_BASE = 0x90
SMALL_INT_MIN = -16
SMALL_INT_MAX = 47

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
