"""The i3bar JSON protocol: block structures and bar output."""